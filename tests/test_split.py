"""SplitOrchestrator on in-memory documents."""

import pytest

from pdfer.config import PdferConfig
from pdfer.errors import EmptyDocumentError, PageIndexError, StructuralError, ValidationError
from pdfer.graph import Name, ObjectId, Reference, Stream, verify_references
from pdfer.ops.merge import MergeOrchestrator
from pdfer.ops.split import PageExtractionError, SplitOrchestrator


def break_page(graph, page_number):
    """Point one page at an object that does not exist."""
    page_id = graph.page_ids()[page_number - 1]
    graph.get_dict(page_id)["Annots"] = [Reference(ObjectId(999, 0))]


class TestSplit:
    def test_every_page_becomes_one_document(self, build_document, page_text):
        source = build_document(25)

        report = SplitOrchestrator().split(source)

        assert report.ok
        assert report.total_pages == 25
        assert [page.number for page in report.pages] == list(range(1, 26))
        for page in report.pages:
            graph = page.graph
            assert graph.page_count == 1
            assert graph.max_id >= max(object_id.number for object_id in graph.objects)
            assert f"(doc page {page.number})".encode() in page_text(graph, graph.page_ids()[0])
            verify_references(graph)

    def test_extracted_page_is_compact(self, build_document):
        graph = SplitOrchestrator().extract_page(build_document(10), 4)

        numbers = sorted(object_id.number for object_id in graph.objects)
        assert numbers == list(range(1, len(numbers) + 1))
        # page, content, font, pages node, catalog
        assert len(graph.objects) == 5
        assert graph.trailer["Size"] == graph.max_id + 1

    def test_page_is_reparented_under_single_entry_tree(self, build_document):
        graph = SplitOrchestrator().extract_page(build_document(3), 2)

        page_id = graph.page_ids()[0]
        page = graph.get_dict(page_id)
        parent = graph.get_dict(page["Parent"].id)
        assert parent["Type"] == Name("Pages")
        assert parent["Count"] == 1
        assert parent["Kids"] == [Reference(page_id)]

    def test_inherited_attributes_survive(self, build_document):
        graph = SplitOrchestrator().extract_page(build_document(3, inherited=True), 1)

        page = graph.get_dict(graph.page_ids()[0])
        assert page["MediaBox"] == [0, 0, 612, 792]
        font = page["Resources"]["Font"]["F1"]
        assert graph.get_dict(font.id)["BaseFont"] == Name("Helvetica")

    def test_metadata_copied_only_when_extracted(self, build_document):
        source = build_document(2)

        graph = SplitOrchestrator().extract_page(source, 1)

        assert graph.trailer["ID"] == source.trailer["ID"]
        # Info hangs off the trailer only, so it is never reachable from a page
        assert "Info" not in graph.trailer

    def test_metadata_copy_disabled(self, build_document):
        config = PdferConfig(copy_metadata_on_split=False)

        graph = SplitOrchestrator(config).extract_page(build_document(2), 1)

        assert "ID" not in graph.trailer

    def test_without_pruning_still_consistent(self, build_document):
        config = PdferConfig(prune_split_output=False)

        graph = SplitOrchestrator(config).extract_page(build_document(5), 3)

        verify_references(graph)
        assert graph.page_count == 1
        assert len(graph.objects) == 5

    def test_old_page_tree_left_behind(self, build_document):
        config = PdferConfig(prune_split_output=False)

        graph = SplitOrchestrator(config).extract_page(build_document(5, inherited=True), 3)

        contents = [node.data for node in graph.objects.values() if isinstance(node, Stream)]
        assert contents == [b"BT /F1 12 Tf 72 720 Td (doc page 3) Tj ET"]
        pages_nodes = [
            node for node in graph.objects.values()
            if isinstance(node, dict) and node.get("Type") == Name("Pages")
        ]
        assert len(pages_nodes) == 1
        assert pages_nodes[0]["Count"] == 1

    def test_selection_subset(self, build_document, page_text):
        report = SplitOrchestrator().split(build_document(6), [2, 5])

        assert [page.number for page in report.pages] == [2, 5]
        second = report.pages[1].graph
        assert b"(doc page 5)" in page_text(second, second.page_ids()[0])

    def test_on_page_called_in_order(self, build_document):
        seen = []

        SplitOrchestrator().split(build_document(4), on_page=lambda page: seen.append(page.number))

        assert seen == [1, 2, 3, 4]

    def test_page_index_out_of_range(self, build_document):
        with pytest.raises(PageIndexError, match=r"Page 7 is out of range \(PDF has 5 pages\)") as info:
            SplitOrchestrator().split(build_document(5), [1, 7])

        assert info.value.index == 7
        assert info.value.total == 5

    def test_extract_page_out_of_range(self, build_document):
        with pytest.raises(PageIndexError):
            SplitOrchestrator().extract_page(build_document(2), 0)

    def test_empty_selection(self, build_document):
        with pytest.raises(ValidationError, match="No pages to split"):
            SplitOrchestrator().split(build_document(2), [])

    def test_document_without_pages(self, build_document):
        with pytest.raises(EmptyDocumentError):
            SplitOrchestrator().split(build_document(0))

    def test_source_not_modified(self, build_document):
        source = build_document(3)
        before = {object_id: repr(node) for object_id, node in source.objects.items()}

        SplitOrchestrator().split(source)

        assert {object_id: repr(node) for object_id, node in source.objects.items()} == before


class TestSplitFailurePolicy:
    def test_abort_raises_with_page_number(self, build_document):
        source = build_document(5)
        break_page(source, 3)

        with pytest.raises(PageExtractionError, match="Page 3") as info:
            SplitOrchestrator().split(source)

        assert info.value.page_number == 3
        assert info.value.cause.object_id == ObjectId(999, 0)
        assert isinstance(info.value, StructuralError)

    def test_skip_records_failure_and_continues(self, build_document, page_text):
        source = build_document(5)
        break_page(source, 3)
        config = PdferConfig(split_error_policy="skip")

        report = SplitOrchestrator(config).split(source)

        assert not report.ok
        assert [page.number for page in report.pages] == [1, 2, 4, 5]
        assert [failure.number for failure in report.failures] == [3]
        for page in report.pages:
            graph = page.graph
            assert f"(doc page {page.number})".encode() in page_text(graph, graph.page_ids()[0])
            verify_references(graph)

    def test_skip_with_pages_on_their_own_resources(self, build_document):
        source = build_document(4, inherited=False)
        break_page(source, 1)
        config = PdferConfig(split_error_policy="skip")

        report = SplitOrchestrator(config).split(source)

        assert [page.number for page in report.pages] == [2, 3, 4]
        assert [failure.number for failure in report.failures] == [1]

    def test_broken_ancestor_fails_every_page(self, build_document):
        source = build_document(2)
        pages = source.get_dict(source.page_ids()[0]).get("Parent")
        source.get_dict(pages.id)["Resources"] = Reference(ObjectId(999, 0))
        config = PdferConfig(split_error_policy="skip")

        report = SplitOrchestrator(config).split(source)

        assert report.pages == []
        assert [failure.number for failure in report.failures] == [1, 2]

    def test_oversized_page_graph(self, build_document):
        config = PdferConfig(reachability_limit=2)

        with pytest.raises(PageExtractionError, match="exceeds 2 objects"):
            SplitOrchestrator(config).split(build_document(2))


class TestMergeThenSplit:
    def test_round_trip_keeps_page_contents(self, build_document, page_text):
        sources = [build_document(1, label=label) for label in "ABCDE"]

        merged = MergeOrchestrator().merge(sources).graph
        report = SplitOrchestrator().split(merged)

        assert len(report.pages) == 5
        for label, page in zip("ABCDE", report.pages):
            graph = page.graph
            assert f"({label} page 1)".encode() in page_text(graph, graph.page_ids()[0])
            verify_references(graph)
