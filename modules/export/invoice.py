"""DOCX invoice rendering by placeholder substitution.

A DOCX file is a zip of XML parts. The template carries ``{{name}}`` tokens in
its ``word/*.xml`` parts; rendering replaces each known token with the
XML-escaped value and copies every other part unchanged. There are no
conditionals or loops, only exact replacement.
"""

import io
import logging
import re
import zipfile
from typing import Dict, Mapping, Union
from xml.sax.saxutils import escape

from errors import ConfigurationError
from weights import to_number

logger = logging.getLogger(__name__)

PLACEHOLDERS = (
    "car_number",
    "supplier_name",
    "gross_weight",
    "tare_count",
    "tare_weight",
    "tare_total",
    "net_weight",
    "date",
    "time",
    "operator_name",
)
DELIMITERS = ("{{", "}}")
# в документах прочерк ASCII, в статистике UNKNOWN_SUPPLIER ("—"); так задумано
NO_SUPPLIER = "-"

_TOKEN = re.compile(r"\{\{(\w+)\}\}")
_PARAGRAPH = re.compile(r"<w:p[ >].*?</w:p>", re.S)
_TEXT_RUN = re.compile(r"(<w:t(?:\s[^>]*)?>)(.*?)(</w:t>)", re.S)

DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def token(name: str) -> str:
    start, end = DELIMITERS
    return f"{start}{name}{end}"


def invoice_context(weighing) -> Dict[str, Union[str, int, float]]:
    """Placeholder values for one resolved weighing."""
    created = weighing.created_at
    return {
        "car_number": weighing.car_number,
        "supplier_name": weighing.supplier_name or NO_SUPPLIER,
        "gross_weight": to_number(weighing.gross_weight),
        "tare_count": weighing.tare_count,
        "tare_weight": to_number(weighing.tare_weight),
        "tare_total": to_number(weighing.tare_total),
        "net_weight": to_number(weighing.net_weight),
        "date": created.strftime("%Y-%m-%d"),
        "time": created.strftime("%H:%M:%S"),
        "operator_name": weighing.operator_email or "",
    }


def substitute(text: str, context: Mapping[str, object]) -> str:
    """Replace known tokens in one pass; substituted values are never rescanned."""

    def replace(match):
        name = match.group(1)
        if name not in context:
            return match.group(0)
        return escape(str(context[name]))

    return _TOKEN.sub(replace, text)


def _join_paragraph_runs(paragraph: str) -> str:
    """
    Word may split one ``{{name}}`` over several ``<w:t>`` runs after editing.
    Text of the runs a token spans is moved into the run where it starts; the
    other runs keep their markup with empty text.
    """
    pieces = list(_TEXT_RUN.finditer(paragraph))
    if len(pieces) < 2:
        return paragraph
    texts = [piece.group(2) for piece in pieces]
    joined = "".join(texts)
    if DELIMITERS[0] not in joined:
        return paragraph

    owner = []
    for index, text in enumerate(texts):
        owner.extend([index] * len(text))
    merged_into = list(range(len(texts)))
    touched = set()
    for match in _TOKEN.finditer(joined):
        first = merged_into[owner[match.start()]]
        last = owner[match.end() - 1]
        if first == last:
            continue
        for index in range(first + 1, last + 1):
            texts[first] += texts[index]
            texts[index] = ""
            merged_into[index] = first
            touched.add(index)
        touched.add(first)
    if not touched:
        return paragraph

    counter = iter(range(len(pieces)))

    def rebuild(piece):
        index = next(counter)
        if index not in touched:
            return piece.group(0)
        opening = piece.group(1)
        if "xml:space" not in opening:
            opening = '<w:t xml:space="preserve">'
        return f"{opening}{texts[index]}{piece.group(3)}"

    return _TEXT_RUN.sub(rebuild, paragraph)


def join_split_tokens(xml: str) -> str:
    return _PARAGRAPH.sub(lambda m: _join_paragraph_runs(m.group(0)), xml)


def render_docx(template: bytes, context: Mapping[str, object]) -> bytes:
    """Return a new DOCX with every ``{{name}}`` from ``context`` substituted."""
    output = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(template)) as source, \
            zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as target:
        for info in source.infolist():
            data = source.read(info.filename)
            if info.filename.startswith("word/") and info.filename.endswith(".xml"):
                xml = join_split_tokens(data.decode("utf-8"))
                data = substitute(xml, context).encode("utf-8")
            target.writestr(info, data)
    return output.getvalue()


def load_template(path: str) -> bytes:
    """Read the template asset; a missing file is a configuration problem."""
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError as exc:
        logger.error("Invoice template unavailable at %s: %s", path, exc)
        raise ConfigurationError("Invoice template not found") from exc


def render_invoice(weighing, template_path: str) -> bytes:
    template = load_template(template_path)
    try:
        return render_docx(template, invoice_context(weighing))
    except zipfile.BadZipFile as exc:
        logger.error("Invoice template at %s is not a DOCX archive", template_path)
        raise ConfigurationError("Invoice template is not a valid document") from exc


# ---------- Шаблон по умолчанию ----------

_CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
  <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
  <Default Extension="xml" ContentType="application/xml"/>
  <Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
  <Override PartName="/word/settings.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.settings+xml"/>
</Types>"""

_RELS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

_DOCUMENT_RELS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/settings" Target="settings.xml"/>
</Relationships>"""

_SETTINGS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:settings xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"/>"""

_LINES = [
    "INVOICE / НАКЛАДНАЯ",
    "Car: {{car_number}}",
    "Supplier: {{supplier_name}}",
    "Gross: {{gross_weight}} | Tare: {{tare_count}} x {{tare_weight}} = {{tare_total}}",
    "Net weight: {{net_weight}}",
    "Date: {{date}} Time: {{time}}",
    "Operator: {{operator_name}}",
]


def build_default_template() -> bytes:
    """Minimal single-page DOCX carrying every placeholder once (as a single run)."""
    paragraphs = "\n".join(
        f'    <w:p><w:r><w:t xml:space="preserve">{escape(line)}</w:t></w:r></w:p>' for line in _LINES
    )
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">\n'
        f"  <w:body>\n{paragraphs}\n  </w:body>\n"
        "</w:document>"
    )
    output = io.BytesIO()
    with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", _CONTENT_TYPES)
        zf.writestr("_rels/.rels", _RELS)
        zf.writestr("word/_rels/document.xml.rels", _DOCUMENT_RELS)
        zf.writestr("word/document.xml", document)
        zf.writestr("word/settings.xml", _SETTINGS)
    return output.getvalue()
