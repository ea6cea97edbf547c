"""
Tests for EULA acceptance.
"""

import pytest

from server_creator.errors import LicenseFileMalformed, LicenseFileMissing
from server_creator.license import LicenseAcceptor

EULA = (
    "#By changing the setting below to TRUE you are indicating your agreement to our EULA "
    "(https://aka.ms/MinecraftEULA).\n"
    "#Mon Jun 12 13:25:51 CEST 2023\n"
    "eula=false\n"
)


@pytest.fixture
def eula(tmp_path):
    p = tmp_path / "eula.txt"
    p.write_bytes(EULA.encode("utf-8"))
    return p


def test_accept_rewrites_only_the_flag_line(eula):
    assert LicenseAcceptor().accept(eula) is True

    before = EULA.encode("utf-8").split(b"\n")
    after = eula.read_bytes().split(b"\n")
    assert len(before) == len(after)
    assert after[2] == b"eula=true"
    assert [l for i, l in enumerate(after) if i != 2] == [l for i, l in enumerate(before) if i != 2]


def test_accept_is_idempotent(eula):
    acceptor = LicenseAcceptor()
    acceptor.accept(eula)
    first = eula.read_bytes()

    assert acceptor.accept(eula) is False
    assert eula.read_bytes() == first


def test_preserves_crlf(tmp_path):
    p = tmp_path / "eula.txt"
    p.write_bytes(b"#comment\r\n#date\r\neula=false\r\nextra=1\r\n")

    LicenseAcceptor().accept(p)

    assert p.read_bytes() == b"#comment\r\n#date\r\neula=true\r\nextra=1\r\n"


def test_file_without_trailing_newline(tmp_path):
    p = tmp_path / "eula.txt"
    p.write_bytes(b"#a\n#b\neula=false")
    LicenseAcceptor().accept(p)
    assert p.read_bytes() == b"#a\n#b\neula=true"


def test_missing_file(tmp_path):
    with pytest.raises(LicenseFileMissing):
        LicenseAcceptor().accept(tmp_path / "eula.txt")


def test_too_short(tmp_path):
    p = tmp_path / "eula.txt"
    p.write_bytes(b"#a\neula=false\n")
    with pytest.raises(LicenseFileMalformed):
        LicenseAcceptor().accept(p)
    assert p.read_bytes() == b"#a\neula=false\n"


def test_empty_file(tmp_path):
    p = tmp_path / "eula.txt"
    p.write_bytes(b"")
    with pytest.raises(LicenseFileMalformed):
        LicenseAcceptor().accept(p)


def test_unexpected_line_is_still_rewritten(tmp_path):
    p = tmp_path / "eula.txt"
    p.write_bytes(b"#a\n#b\naccepted=no\n")
    assert LicenseAcceptor().accept(p) is True
    assert p.read_bytes() == b"#a\n#b\neula=true\n"


def test_non_utf8_comment_is_kept_byte_for_byte(tmp_path):
    p = tmp_path / "eula.txt"
    p.write_bytes(b"#\xe9t\xe9\n#date\neula=false\n")
    assert LicenseAcceptor().accept(p) is True
    assert p.read_bytes() == b"#\xe9t\xe9\n#date\neula=true\n"
