from app.batch import EXIT_CONFIG, EXIT_FAILED, EXIT_OK, main
from app.exceptions import MalformedBundle
from app.services.pipeline import DealPdfPipeline
from fakes import FakeConverter, FakeRecordStore, FakeUploader


ENV = {"HUBSPOT_TOKEN": "t", "DEAL_ID": "42"}


def _factory(store, uploader=None):
    def factory(settings):
        return DealPdfPipeline(store, FakeConverter(), uploader or FakeUploader(url="https://cdn.test/x.pdf"))

    return factory


def test_batch_success(capsys):
    store = FakeRecordStore()
    assert main(ENV, pipeline_factory=_factory(store)) == EXIT_OK
    assert "OK pdfUrl: https://cdn.test/x.pdf" in capsys.readouterr().out
    assert store.patches == [("42", {"pdf_url": "https://cdn.test/x.pdf", "pdf_statut": "GENERE"})]


def test_batch_failure_exits_non_zero(capsys):
    store = FakeRecordStore(fetch_error=MalformedBundle("bad json"))
    assert main(ENV, pipeline_factory=_factory(store)) == EXIT_FAILED
    assert "bad json" in capsys.readouterr().err
    assert store.patches == [("42", {"pdf_statut": "ECHEC"})]


def test_batch_missing_config_runs_nothing(capsys):
    calls = []

    def factory(settings):
        calls.append(settings)
        raise AssertionError("pipeline must not be built")

    assert main({"HUBSPOT_TOKEN": "t"}, pipeline_factory=factory) == EXIT_CONFIG
    assert "DEAL_ID" in capsys.readouterr().err
    assert calls == []
