#!/usr/bin/env python3
"""
Basic example showing how to turn a folder of page photos into a PDF with scanbook,
and optionally keep it in the local library as a book.
"""

import argparse
from pathlib import Path

from scanbook import PageNormalizer, PageSequence, PdfAssembler
from scanbook.capture import FileImageSource
from scanbook.config import ScanbookConfig
from scanbook.session import DEFAULT_AUTHOR
from scanbook.storage.config import StorageConfig
from scanbook.storage.records import BookRecord, new_id


def main():
    parser = argparse.ArgumentParser(description="Assemble page images into a PDF")
    parser.add_argument("folder", help="Folder with page images, sorted by file name")
    parser.add_argument("--output", help="Output PDF path", default="scan.pdf")
    parser.add_argument("--title", help="Also add the PDF to the library under this title", default=None)

    args = parser.parse_args()

    folder = Path(args.folder)
    if not folder.is_dir():
        print(f"Error: Folder not found: {folder}")
        return 1

    selection = FileImageSource.classify(sorted(folder.iterdir()))
    if not selection.images:
        print(f"Error: No images found in {folder}")
        return 1

    normalizer = PageNormalizer()
    pages = PageSequence()
    for path in selection.images:
        position = pages.append(normalizer.make_pending_page(FileImageSource.read(path)))
        print(f"Page {position + 1}: {path.name}")

    document = PdfAssembler().assemble(pages.to_ordered_list())
    Path(args.output).write_bytes(document.pdf_bytes)
    print(f"Wrote {document.page_count} pages to {args.output}")

    if args.title:
        config = ScanbookConfig.from_env()
        book_id = new_id()
        file_path, cover_url = StorageConfig.create_library(config).save_document(book_id, document)
        book = BookRecord(id=book_id, title=args.title, author=DEFAULT_AUTHOR, cover_url=cover_url, file_path=file_path)
        store = StorageConfig.create_book_store(config)
        try:
            store.save_book(book)
        finally:
            store.close()
        print(f"Added book {book.id}")

    return 0


if __name__ == "__main__":
    exit(main())
