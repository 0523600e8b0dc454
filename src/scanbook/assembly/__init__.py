from scanbook.assembly.page_layout import A4, LETTER, PageSize, Placement, fit_to_page
from scanbook.assembly.pdf_assembler import AssembledDocument, PdfAssembler
from scanbook.assembly.pdf_utils import is_pdf, count_pdf_pages, extract_pages_text
from scanbook.assembly.cover import render_cover, render_pdf_page
