# -*- coding: utf-8 -*-
"""
create_invoice_template.py — пишет DOCX-шаблон накладной с плейсхолдерами.

- python create_invoice_template.py            → в INVOICE_TEMPLATE_PATH из конфига
- python create_invoice_template.py out.docx   → в указанный файл
- --force                                      → перезаписать существующий
"""

import argparse
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from modules.export.invoice import build_default_template  # noqa: E402


def write_template(path: str, force: bool = False) -> bool:
    if os.path.exists(path) and not force:
        print(f"⚠️  {path} already exists (use --force to overwrite).")
        return False
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "wb") as fh:
        fh.write(build_default_template())
    print(f"✅ Created: {path}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the default invoice template.")
    parser.add_argument("path", nargs="?", default=Config.INVOICE_TEMPLATE_PATH, help="Output .docx path")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing file")
    args = parser.parse_args()
    sys.exit(0 if write_template(args.path, args.force) else 1)
