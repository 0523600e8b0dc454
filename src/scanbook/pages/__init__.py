from scanbook.pages.pending_page import PendingPage
from scanbook.pages.page_sequence import PageSequence
