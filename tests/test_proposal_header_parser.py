from datetime import date

import pytest

from SymPepTracker.share.enums import ProposalStatus, ProposalType
from SymPepTracker.share.errors import ValidationError
from SymPepTracker.share.ProposalHeaderParser import ProposalHeaderParser

TEMPLATE = """# SymPEP XXXX — Equation class

**Author:** Alice <alice@example.org>, Bob
**Status:** Draft
**Type:** Standards Track
**Created:** 2020-05-01
**Resolution:**
**Discussion:** [mailing list](https://groups.example.org/t/equation)

## Abstract

Type: Informational
This body line must not override the header.
"""


def test_parse_template_header():
    header = ProposalHeaderParser.parse(TEMPLATE)

    assert header.title == "Equation class"
    assert header.champions == ["Alice", "Bob"]
    assert header.status == ProposalStatus.DRAFT
    assert header.type == ProposalType.STANDARDS_TRACK
    assert header.created == date(2020, 5, 1)
    assert header.number is None
    assert header.resolution is None
    assert header.discussions == ["https://groups.example.org/t/equation"]


def test_parse_plain_pep_style_header():
    text = "\n".join(
        [
            "SymPEP: 7",
            "Title: Adopt a final qualifier convention",
            "Author: carol",
            "Status: Accepted",
            "Type: process",
            "Created: 03-Jun-2021",
            "Resolution: https://github.com/example/sympeps/pull/7",
            "Post-History: https://a.example/1, https://a.example/2",
        ]
    )
    header = ProposalHeaderParser.parse(text)

    assert header.number == 7
    assert header.title == "Adopt a final qualifier convention"
    assert header.status == ProposalStatus.ACCEPTED
    assert header.type == ProposalType.PROCESS
    assert header.created == date(2021, 6, 3)
    assert header.resolution == "https://github.com/example/sympeps/pull/7"
    assert header.discussions == ["https://a.example/1", "https://a.example/2"]


@pytest.mark.parametrize(
    "missing",
    ["Author", "Type", "Created"],
)
def test_missing_required_field(missing):
    lines = [
        "Title: Static typing",
        "Author: dave",
        "Type: Informational",
        "Created: 2021-01-01",
    ]
    text = "\n".join(line for line in lines if not line.startswith(missing))
    with pytest.raises(ValidationError):
        ProposalHeaderParser.parse(text)


def test_missing_title():
    with pytest.raises(ValidationError):
        ProposalHeaderParser.parse("Author: dave\nType: Process\nCreated: 2021-01-01")


@pytest.mark.parametrize(
    "field, value",
    [("Type", "Tutorial"), ("Status", "Pending"), ("Created", "yesterday"), ("SymPEP", "12a")],
)
def test_malformed_field(field, value):
    fields = {
        "Title": "Pattern matching dependency",
        "Author": "erin",
        "Type": "Informational",
        "Created": "2021-01-01",
    }
    fields[field] = value
    text = "\n".join(f"{key}: {val}" for key, val in fields.items())
    with pytest.raises(ValidationError):
        ProposalHeaderParser.parse(text)
