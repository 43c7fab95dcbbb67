"""Tests for the barcode workflow controller."""

import asyncio

import pytest

from barcodesheet.sheet import SheetParseError
from barcodesheet.workflow import (
    BarcodeWorkflow,
    ExportInProgressError,
    NoRecordsError,
    WorkflowState,
)


class TestIngest:
    """Tests for ingest_file() / ingest_bytes()."""

    def test_ingest_builds_records_and_handles(self, scenario_xlsx):
        wf = BarcodeWorkflow()
        records = wf.ingest_file(scenario_xlsx)

        assert [r.primary_code for r in records] == ["A007-X", "B012-Y"]
        assert wf.state.records == records
        assert len(wf.state.handles) == 2 * len(records)
        assert wf.state.handles[0].code == "A007-X"
        assert wf.state.handles[3].code == "S200"
        assert wf.state.generation == 1
        assert wf.can_export

    def test_reingest_replaces_collection(self, write_xlsx, scenario_xlsx):
        wf = BarcodeWorkflow()
        wf.ingest_file(scenario_xlsx)
        first_state = wf.state

        wf.ingest_file(write_xlsx([["Z", "1", "Q", "S9", "only"]], name="other.xlsx"))

        assert [r.primary_code for r in wf.state.records] == ["Z001-Q"]
        assert len(wf.state.handles) == 2
        assert wf.state.generation == 2
        # The old snapshot is untouched
        assert len(first_state.records) == 2

    def test_same_file_twice_same_records(self, scenario_xlsx):
        wf = BarcodeWorkflow()
        first = wf.ingest_file(scenario_xlsx)
        second = wf.ingest_file(scenario_xlsx)

        assert first == second

    def test_parse_error_keeps_state(self, scenario_xlsx):
        """Test that a failed ingestion leaves the prior state intact."""
        wf = BarcodeWorkflow()
        wf.ingest_file(scenario_xlsx)
        before = wf.state

        with pytest.raises(SheetParseError):
            wf.ingest_bytes(b"definitely not a workbook")

        assert wf.state is before

    def test_ingest_keeps_preview(self, scenario_xlsx):
        wf = BarcodeWorkflow()
        wf.submit_manual("MANUAL1")
        wf.ingest_file(scenario_xlsx)

        assert wf.state.manual_code == "MANUAL1"

    def test_sheet_without_valid_rows(self, write_xlsx):
        wf = BarcodeWorkflow()
        wf.ingest_file(write_xlsx([["A", "1"], ["B"]]))

        assert wf.state.records == ()
        assert wf.state.handles == ()
        assert not wf.can_export


class TestSubmitManual:
    """Tests for submit_manual()."""

    def test_sets_preview(self):
        wf = BarcodeWorkflow()

        assert wf.submit_manual("  abc-1  ") is True
        assert wf.state.manual_code == "abc-1"
        assert wf.state.preview.code == "ABC-1"

    def test_whitespace_is_ignored(self):
        """Test that blank input leaves the preview unchanged."""
        wf = BarcodeWorkflow()
        wf.submit_manual("FIRST")
        before = wf.state

        assert wf.submit_manual("  ") is False
        assert wf.submit_manual("") is False
        assert wf.state is before

    def test_replaces_prior_preview(self):
        wf = BarcodeWorkflow()
        wf.submit_manual("FIRST")
        wf.submit_manual("SECOND")

        assert wf.state.manual_code == "SECOND"
        assert wf.state.preview.code == "SECOND"

    def test_unencodable_code(self):
        wf = BarcodeWorkflow()

        assert wf.submit_manual("no_underscores") is True
        assert wf.state.manual_code == "no_underscores"
        assert wf.state.preview is None


class TestExport:
    """Tests for export()."""

    def test_exports_to_barcodes_pdf(self, scenario_xlsx, tmp_path):
        wf = BarcodeWorkflow()
        wf.ingest_file(scenario_xlsx)

        result = asyncio.run(wf.export(tmp_path))

        assert result.output_path == tmp_path / "barcodes.pdf"
        assert result.images_placed == 4
        assert result.output_path.read_bytes().startswith(b"%PDF")

    def test_no_records(self, tmp_path):
        wf = BarcodeWorkflow()

        with pytest.raises(NoRecordsError):
            asyncio.run(wf.export(tmp_path))

    def test_concurrent_export_rejected(self, scenario_xlsx, tmp_path):
        """Test that a second export while one is running is refused."""
        wf = BarcodeWorkflow()
        wf.ingest_file(scenario_xlsx)

        async def run():
            first = asyncio.create_task(wf.export(tmp_path, "first.pdf"))
            await asyncio.sleep(0)
            with pytest.raises(ExportInProgressError):
                await wf.export(tmp_path, "second.pdf")
            return await first

        result = asyncio.run(run())

        assert result.output_path.exists()
        assert not (tmp_path / "second.pdf").exists()

    def test_export_allowed_again_after_finish(self, scenario_xlsx, tmp_path):
        wf = BarcodeWorkflow()
        wf.ingest_file(scenario_xlsx)

        asyncio.run(wf.export(tmp_path, "one.pdf"))
        asyncio.run(wf.export(tmp_path, "two.pdf"))

        assert (tmp_path / "two.pdf").exists()

    def test_reingest_during_export_uses_snapshot(self, scenario_xlsx, write_xlsx, tmp_path):
        """Test that an in-flight export keeps the records it started with."""
        wf = BarcodeWorkflow()
        wf.ingest_file(scenario_xlsx)
        other = write_xlsx([["Z", "1", "Q", "S9", "only"]], name="other.xlsx")

        async def run():
            task = asyncio.create_task(wf.export(tmp_path))
            await asyncio.sleep(0)
            wf.ingest_file(other)
            return await task

        result = asyncio.run(run())

        assert result.records == 2
        assert len(wf.state.records) == 1


class TestWorkflowState:
    """Tests for WorkflowState."""

    def test_defaults(self):
        state = WorkflowState()

        assert state.records == ()
        assert state.handles == ()
        assert state.manual_code is None
        assert state.preview is None

    def test_frozen(self):
        with pytest.raises(Exception):
            WorkflowState().records = ()
