import pytest

from data_models import FileUpload
from errors import ExtractionError
from resume_loader import extract_text, is_supported, load_uploads
from tests.helpers import make_pdf, text_upload


def test_plain_text_decoded():
    assert extract_text(text_upload("cv.md", "# Jane Doe\nPython")) == "# Jane Doe\nPython"


def test_utf8_bom_stripped():
    upload = FileUpload(name="cv.txt", data="\ufeffJosé".encode("utf-8"))
    assert extract_text(upload) == "José"


def test_undecodable_text_names_file():
    upload = FileUpload(name="broken.txt", data=b"\xff\xfe\xfa")
    with pytest.raises(ExtractionError, match="Error reading file: broken.txt"):
        extract_text(upload)


def test_pdf_pages_joined_in_order():
    upload = FileUpload(name="cv.pdf", data=make_pdf(["Jane Doe Engineer", "Python AWS"]),
                        content_type="application/pdf")
    assert extract_text(upload) == "Jane Doe Engineer\nPython AWS\n"


def test_corrupt_pdf_reports_file():
    upload = FileUpload(name="bad.pdf", data=b"%PDF-1.4 not really a pdf")
    with pytest.raises(ExtractionError, match="Failed to parse PDF: bad.pdf"):
        extract_text(upload)


def test_supported_extensions():
    from pathlib import Path
    assert is_supported(Path("a.PDF"))
    assert is_supported(Path("a.md"))
    assert not is_supported(Path("a.docx"))


def test_load_uploads_skips_unsupported(tmp_path):
    (tmp_path / "a.txt").write_text("A", encoding="utf-8")
    (tmp_path / "b.docx").write_bytes(b"PK")
    uploads = load_uploads([tmp_path / "a.txt", tmp_path / "b.docx", tmp_path / "missing.md"])
    assert [u.name for u in uploads] == ["a.txt"]
