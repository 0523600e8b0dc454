from scanbook.viewer.document_viewer import DocumentViewer
