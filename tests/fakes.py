from app.schemas import DealBundle


class FakeRecordStore:
    def __init__(self, bundle=None, fetch_error=None, patch_errors=None):
        self.bundle = bundle if bundle is not None else DealBundle()
        self.fetch_error = fetch_error
        # Consumed in order, one per patch call; None means the call succeeds.
        self.patch_errors = list(patch_errors or [])
        self.fetched = []
        self.patches = []

    def fetch_bundle(self, deal_id):
        self.fetched.append(deal_id)
        if self.fetch_error:
            raise self.fetch_error
        return self.bundle

    def patch_fields(self, deal_id, fields):
        self.patches.append((deal_id, dict(fields)))
        err = self.patch_errors.pop(0) if self.patch_errors else None
        if err:
            raise err


class FakeConverter:
    def __init__(self, error=None, output=b"%PDF-1.4 fake"):
        self.error = error
        self.output = output
        self.html = []

    def convert(self, html):
        self.html.append(html)
        if self.error:
            raise self.error
        return self.output


class FakeUploader:
    def __init__(self, url="https://files.example.com/deal.pdf", error=None):
        self.url = url
        self.error = error
        self.calls = []

    def upload(self, content, filename, options=None):
        self.calls.append((content, filename, options))
        if self.error:
            raise self.error
        return self.url
