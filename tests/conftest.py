import pytest

from app.exceptions import RecordPatchFailure
from app.schemas import DealBundle


@pytest.fixture()
def full_bundle():
    return DealBundle.model_validate(
        {
            "deal": {
                "properties": {
                    "dealname": "Acme Renewal",
                    "amount": "12000",
                    "closedate": "2025-12-31",
                    "pipeline": "default",
                    "dealstage": "closedwon",
                }
            },
            "contact": {
                "properties": {
                    "firstname": "Jo",
                    "lastname": "Lee",
                    "email": "jo@acme.test",
                    "phone": "+33 1 02 03 04 05",
                }
            },
            "company": {"properties": {"name": "Acme", "domain": "acme.test", "city": "Lyon"}},
            "line_items": [
                {"properties": {"name": "Licence", "quantity": "2", "price": "5000", "amount": "10000"}},
                {"properties": {"name": "Support", "quantity": "1", "price": "2000", "amount": "2000"}},
            ],
        }
    )


@pytest.fixture()
def patch_failure():
    return RecordPatchFailure(503, "unavailable")
