"""End-to-end runs of the command line entry point."""

import pytest
from pypdf import PdfWriter

from pdfer.cli import main
from pdfer.intake import load_pdf, save_pdf


def scripted(*answers):
    pending = list(answers)

    def ask(prompt):
        if not pending:
            raise EOFError
        return pending.pop(0)

    return ask


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_pdf(workdir, build_document):
    def _make(name, pages, **kwargs):
        return save_pdf(build_document(pages, label=name, **kwargs), workdir / f"{name}.pdf")

    return _make


def page_files(folder):
    return sorted(p.name for p in folder.iterdir())


class TestInfo:
    def test_bare_file_means_info(self, make_pdf, capsys):
        path = make_pdf("report", 4, title="Quarterly")

        assert main([str(path)], ask=scripted()) == 0

        out = capsys.readouterr().out
        assert "Pages: 4" in out
        assert "Title: Quarterly" in out

    def test_several_files_print_total(self, make_pdf, capsys):
        paths = [make_pdf("a", 1), make_pdf("b", 2)]

        assert main(["info"] + [str(p) for p in paths], ask=scripted()) == 0

        assert "Total: 2 PDF(s), 3 page(s)" in capsys.readouterr().out

    def test_directory_needs_recursive(self, workdir, make_pdf, capsys):
        make_pdf("a", 1)

        assert main([str(workdir)], ask=scripted()) == 2
        assert "[FAIL]" in capsys.readouterr().out

        assert main([str(workdir), "-r"], ask=scripted()) == 0

    def test_no_arguments(self, capsys):
        assert main([], ask=scripted()) == 2
        assert "No PDF files or command specified" in capsys.readouterr().out


class TestMergeCommand:
    def test_merge(self, workdir, make_pdf, capsys):
        first, second = make_pdf("one", 2), make_pdf("two", 3)

        code = main(["merge", str(first), str(second), "-o", "out.pdf"], ask=scripted())

        assert code == 0
        assert load_pdf(workdir / "out.pdf").page_count == 5
        assert "[OK] Merged PDF saved" in capsys.readouterr().out

    def test_alias_and_suffix(self, workdir, make_pdf):
        first = make_pdf("one", 1)

        assert main(["m", str(first), str(first), "-o", "combined"], ask=scripted()) == 0
        assert load_pdf(workdir / "combined.pdf").page_count == 2

    def test_existing_output_abort(self, workdir, make_pdf):
        first = make_pdf("one", 1)
        existing = workdir / "out.pdf"
        existing.write_bytes(b"keep me")

        assert main(["merge", str(first), str(first), "-o", "out.pdf"], ask=scripted("n")) == 0
        assert existing.read_bytes() == b"keep me"

    def test_empty_input_aborts_without_output(self, workdir, make_pdf, capsys):
        full, empty = make_pdf("full", 2), workdir / "empty.pdf"
        PdfWriter().write(str(empty))

        code = main(["merge", str(full), str(empty), "-o", "out.pdf"], ask=scripted())

        assert code == 2
        assert not (workdir / "out.pdf").exists()
        assert "has no pages" in capsys.readouterr().out

    def test_missing_input(self, workdir, make_pdf):
        first = make_pdf("one", 1)

        assert main(["merge", str(first), "ghost.pdf"], ask=scripted()) == 1
        assert not (workdir / "merged.pdf").exists()


class TestSplitCommand:
    def test_split_all_into_default_folder(self, workdir, make_pdf):
        source = make_pdf("doc", 4)

        assert main(["split", str(source)], ask=scripted()) == 0

        folder = workdir / "doc_pages"
        assert page_files(folder) == [f"page_00{n}.pdf" for n in range(1, 5)]
        assert load_pdf(folder / "page_003.pdf").page_count == 1

    def test_split_selection(self, workdir, make_pdf):
        source = make_pdf("doc", 6)

        assert main(["s", str(source), "2,4-5", "-o", "picked"], ask=scripted()) == 0
        assert page_files(workdir / "picked") == ["page_002.pdf", "page_004.pdf", "page_005.pdf"]

    def test_invalid_selection_reprompts(self, workdir, make_pdf, capsys):
        source = make_pdf("doc", 3)

        assert main(["split", str(source), "9", "-o", "out"], ask=scripted("1-2")) == 0

        assert "Invalid page spec" in capsys.readouterr().out
        assert page_files(workdir / "out") == ["page_001.pdf", "page_002.pdf"]

    def test_invalid_selection_then_abort(self, workdir, make_pdf):
        source = make_pdf("doc", 3)

        assert main(["split", str(source), "0-1", "-o", "out"], ask=scripted("")) == 0
        assert not (workdir / "out").exists()

    def test_stale_pages_removed_on_overwrite(self, workdir, make_pdf):
        source = make_pdf("doc", 2)
        folder = workdir / "out"
        folder.mkdir()
        (folder / "page_009.pdf").write_bytes(b"old")
        (folder / "readme.txt").write_text("keep")

        assert main(["split", str(source), "-o", "out"], ask=scripted("y")) == 0
        assert page_files(folder) == ["page_001.pdf", "page_002.pdf", "readme.txt"]

    def test_extra_arguments_rejected(self, make_pdf, capsys):
        source = make_pdf("doc", 2)

        assert main(["split", str(source), "1", "stray.pdf"], ask=scripted()) == 2
        assert "accepts only ONE input PDF" in capsys.readouterr().out

    def test_missing_input(self, workdir):
        assert main(["split", "ghost.pdf"], ask=scripted()) == 1
