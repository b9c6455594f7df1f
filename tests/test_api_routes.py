"""
tests/test_api_routes.py

HTTP contract tests. Repositories and the processor are swapped for
in-memory fakes through FastAPI dependency overrides.
"""

from __future__ import annotations

import io
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi import FastAPI, HTTPException, UploadFile
from fastapi.testclient import TestClient

from app.api.dependencies import (
    get_business_id,
    get_discount_rule_repository,
    get_import_log_repository,
    get_import_processor,
    get_import_upload,
)
from app.api.routers import discount_rules_router, imports_router
from app.config import ImportSettings, get_import_settings
from app.services.import_processor import ImportProcessor
from db.session import get_db


class FakeRunHistory:
    def __init__(self, business_id: uuid.UUID) -> None:
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        self.run = SimpleNamespace(
            id=uuid.uuid4(),
            business_id=business_id,
            import_type="products",
            file_name="products.csv",
            file_size=120,
            total_rows=3,
            successful_rows=2,
            failed_rows=1,
            status="partial",
            validation_errors=None,
            created_at=now,
            completed_at=now,
        )
        self.detail = SimpleNamespace(
            row_number=2,
            row_data={"name": "Mug", "price": "4"},
            error_message="Database error: duplicate key",
            error_type="database",
        )

    def list_runs(self, *, business_id, status=None, limit=100):
        if status and status != self.run.status:
            return []
        return [self.run]

    def get_run(self, *, business_id, run_id):
        return self.run if run_id == self.run.id else None

    def list_row_errors(self, *, run_id):
        return [self.detail]


@pytest.fixture()
def history(business_id) -> FakeRunHistory:
    return FakeRunHistory(business_id)


@pytest.fixture()
def client(import_log_store, record_store, discount_rule_repository, history, business_id) -> TestClient:
    app = FastAPI()
    app.include_router(imports_router)
    app.include_router(discount_rules_router)

    settings = ImportSettings(max_file_bytes=1024, display_error_limit=2)
    app.dependency_overrides[get_business_id] = lambda: business_id
    app.dependency_overrides[get_import_settings] = lambda: settings
    app.dependency_overrides[get_import_processor] = lambda: ImportProcessor(
        import_log_repository=import_log_store,
        record_repository=record_store,
        max_file_bytes=settings.max_file_bytes,
    )
    app.dependency_overrides[get_import_log_repository] = lambda: history
    app.dependency_overrides[get_discount_rule_repository] = lambda: discount_rule_repository
    return TestClient(app)


@pytest.fixture()
def headers(user_id) -> dict[str, str]:
    return {"X-User-Id": str(user_id)}


class TestTemplates:
    def test_download_csv(self, client: TestClient) -> None:
        response = client.get("/imports/templates/customers")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "customers_template.csv" in response.headers["content-disposition"]
        assert response.text.startswith("name,email,phone,address,company\n")

    def test_unknown_entity_type_is_404(self, client: TestClient) -> None:
        response = client.get("/imports/templates/vendors")
        assert response.status_code == 404

    def test_template_info(self, client: TestClient) -> None:
        body = client.get("/imports/templates/bills/info").json()
        assert body["required_fields"] == ["customer_name", "total_amount"]


class TestImportUpload:
    def test_successful_import(self, client: TestClient, headers, record_store) -> None:
        files = {"file": ("products.csv", b"name,price\nLamp,10\nMug,4\n", "text/csv")}

        response = client.post("/imports/products", files=files, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "success"
        assert body["processed_rows"] == 2
        assert len(record_store.inserted) == 2

    def test_validation_failure_is_200_with_capped_display(self, client: TestClient, headers) -> None:
        files = {"file": ("products.csv", b"name,price\nA,x\nB,y\nC,z\n", "text/csv")}

        response = client.post("/imports/products", files=files, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert len(body["errors"]) == 3
        assert body["display_errors"] == [
            "Row 1: price must be a number",
            "Row 2: price must be a number",
            "... and 1 more errors",
        ]

    @pytest.mark.parametrize(
        ("file_name", "content", "status_code"),
        [
            ("stock.xlsx", b"PK", 501),
            ("stock.pdf", b"%PDF", 400),
            ("empty.csv", b"", 400),
            ("big.csv", b"x" * 2048, 400),
        ],
    )
    def test_rejected_uploads(self, client: TestClient, headers, file_name, content, status_code) -> None:
        response = client.post(
            "/imports/products",
            files={"file": (file_name, content, "application/octet-stream")},
            headers=headers,
        )
        assert response.status_code == status_code

    def test_oversized_upload_never_reaches_the_processor(
        self, client: TestClient, headers, import_log_store
    ) -> None:
        content = b"name,price\n" + b"Lamp,10\n" * 200
        files = {"file": ("products.csv", content, "text/csv")}

        response = client.post("/imports/products", files=files, headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "File is larger than the limit of 1024 bytes."
        assert import_log_store.runs == {}

    def test_unknown_entity_type_upload_is_404(self, client: TestClient, headers) -> None:
        files = {"file": ("x.csv", b"a\n1\n", "text/csv")}
        assert client.post("/imports/vendors", files=files, headers=headers).status_code == 404

    def test_missing_user_header_is_rejected(self, client: TestClient) -> None:
        files = {"file": ("products.csv", b"name,price\nLamp,10\n", "text/csv")}
        assert client.post("/imports/products", files=files).status_code == 422

    def test_malformed_user_header_is_401(self, client: TestClient) -> None:
        files = {"file": ("products.csv", b"name,price\nLamp,10\n", "text/csv")}
        response = client.post("/imports/products", files=files, headers={"X-User-Id": "nope"})
        assert response.status_code == 401


class TestImportHistory:
    def test_list_runs(self, client: TestClient, history: FakeRunHistory) -> None:
        body = client.get("/imports", params={"status": "partial"}).json()

        assert body["count"] == 1
        assert body["items"][0]["id"] == str(history.run.id)

    def test_get_run_with_row_errors(self, client: TestClient, history: FakeRunHistory) -> None:
        body = client.get(f"/imports/{history.run.id}").json()

        assert body["status"] == "partial"
        assert body["row_errors"][0]["error_type"] == "database"

    def test_unknown_run_is_404(self, client: TestClient) -> None:
        assert client.get(f"/imports/{uuid.uuid4()}").status_code == 404


class TestDiscountRules:
    def _create(self, client: TestClient, **overrides) -> dict:
        payload = {"name": "Ten off", "type": "percentage", "discount_value": 10}
        payload.update(overrides)
        response = client.post("/discount-rules", json=payload)
        assert response.status_code == 201
        return response.json()

    def test_create_and_list(self, client: TestClient) -> None:
        created = self._create(client, conditions={"min_amount": 50})

        listed = client.get("/discount-rules").json()

        assert [rule["id"] for rule in listed] == [created["id"]]
        assert created["conditions"] == {"min_amount": 50.0}
        assert created["is_active"] is True

    def test_update_and_delete(self, client: TestClient) -> None:
        created = self._create(client)

        patched = client.patch(f"/discount-rules/{created['id']}", json={"discount_value": 15})
        assert patched.json()["discount_value"] == 15

        assert client.delete(f"/discount-rules/{created['id']}").status_code == 204
        assert client.delete(f"/discount-rules/{created['id']}").status_code == 404

    def test_null_fields_in_patch_leave_the_rule_unchanged(self, client: TestClient) -> None:
        created = self._create(client)

        response = client.patch(
            f"/discount-rules/{created['id']}",
            json={"name": None, "is_active": None, "discount_value": 12},
        )

        assert response.status_code == 200
        body = response.json()
        assert (body["name"], body["is_active"], body["discount_value"]) == ("Ten off", True, 12)

    def test_invalid_type_is_422(self, client: TestClient) -> None:
        response = client.post(
            "/discount-rules",
            json={"name": "x", "type": "loyalty", "discount_value": 1},
        )
        assert response.status_code == 422

    def test_evaluate(self, client: TestClient) -> None:
        self._create(client, name="Ten off", type="percentage", discount_value=10)
        self._create(client, name="Big spender", type="fixed", discount_value=50, conditions={"min_amount": 500})
        self._create(
            client,
            name="Gadgets",
            type="percentage",
            discount_value=20,
            conditions={"categories": ["Electronics"]},
        )

        body = client.post(
            "/discount-rules/evaluate",
            json={"total_amount": 200, "items": [{"quantity": 2, "category": "Clothing"}]},
        ).json()

        assert [item["name"] for item in body["applicable"]] == ["Ten off"]
        assert body["best"]["amount"] == 20
        assert body["best"]["conditions_summary"] == "No conditions"


class _CountingStream(io.BytesIO):
    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.requested: list[int] = []

    def read(self, size: int | None = -1) -> bytes:
        self.requested.append(size)
        return super().read(size)


class TestUploadReading:
    def test_reads_at_most_one_byte_past_the_limit(self) -> None:
        stream = _CountingStream(b"x" * 5000)
        upload = UploadFile(file=stream, filename="big.csv")

        with pytest.raises(HTTPException) as excinfo:
            get_import_upload(file=upload, settings=ImportSettings(max_file_bytes=10))

        assert excinfo.value.status_code == 400
        assert stream.requested == [11]

    def test_upload_within_the_limit(self) -> None:
        upload = UploadFile(file=io.BytesIO(b"name\nA\n"), filename=" items.csv ")

        result = get_import_upload(file=upload, settings=ImportSettings(max_file_bytes=10))

        assert (result.file_name, result.content) == ("items.csv", b"name\nA\n")


class TestBusinessScope:
    @pytest.fixture()
    def client_for(self, discount_rule_repository, membership_session):
        def build(business_ids) -> TestClient:
            app = FastAPI()
            app.include_router(discount_rules_router)
            app.dependency_overrides[get_db] = lambda: membership_session(business_ids)
            app.dependency_overrides[get_discount_rule_repository] = lambda: discount_rule_repository
            return TestClient(app)

        return build

    def test_user_without_a_business_is_forbidden(self, client_for, headers) -> None:
        response = client_for([]).get("/discount-rules", headers=headers)

        assert response.status_code == 403
        assert response.json()["detail"] == (
            "No business found for this user. Please set up a business first."
        )

    def test_ambiguous_membership_is_forbidden(self, client_for, headers) -> None:
        response = client_for([uuid.uuid4(), uuid.uuid4()]).get("/discount-rules", headers=headers)
        assert response.status_code == 403

    def test_single_business_is_resolved(self, client_for, headers) -> None:
        response = client_for([uuid.uuid4()]).get("/discount-rules", headers=headers)

        assert response.status_code == 200
        assert response.json() == []

    def test_import_without_a_business_creates_no_run(
        self, headers, import_log_store, record_store, membership_session
    ) -> None:
        app = FastAPI()
        app.include_router(imports_router)
        app.dependency_overrides[get_db] = lambda: membership_session([])
        app.dependency_overrides[get_import_processor] = lambda: ImportProcessor(
            import_log_repository=import_log_store,
            record_repository=record_store,
        )
        files = {"file": ("products.csv", b"name,price\nLamp,10\n", "text/csv")}

        response = TestClient(app).post("/imports/products", files=files, headers=headers)

        assert response.status_code == 403
        assert import_log_store.runs == {}
