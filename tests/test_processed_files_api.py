"""Tests covering the Storage Service endpoints."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from fastapi.testclient import TestClient

from conftest import API_KEY

CONTENT = '{"test":"data"}'


def _receive(client: TestClient, file_name: str = "test", content: str = CONTENT, api_key: str = API_KEY):
    return client.post(
        "/ReceiveProcessedFile",
        json={"fileName": file_name, "fileContent": content},
        headers={"ApiKey": api_key},
    )


def test_receive_rejects_invalid_api_key(storage_client: TestClient) -> None:
    response = _receive(storage_client, api_key="invalid-api-key")

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid API Key"
    assert storage_client.get("/").json() == []


def test_receive_rejects_missing_api_key_even_without_body(storage_client: TestClient) -> None:
    response = storage_client.post("/ReceiveProcessedFile")

    assert response.status_code == 401


def test_receive_checks_api_key_before_payload(storage_client: TestClient) -> None:
    response = storage_client.post(
        "/ReceiveProcessedFile",
        content=b"{not json",
        headers={"ApiKey": "wrong", "Content-Type": "application/json"},
    )

    assert response.status_code == 401


def test_receive_rejects_null_body(storage_client: TestClient) -> None:
    empty = storage_client.post("/ReceiveProcessedFile", headers={"ApiKey": API_KEY})
    null = storage_client.post(
        "/ReceiveProcessedFile",
        content=b"null",
        headers={"ApiKey": API_KEY, "Content-Type": "application/json"},
    )

    assert empty.status_code == 400
    assert null.status_code == 400
    assert null.json()["detail"] == "Invalid file data"


def test_receive_rejects_incomplete_body(storage_client: TestClient) -> None:
    response = storage_client.post(
        "/ReceiveProcessedFile",
        json={"fileName": "test"},
        headers={"ApiKey": API_KEY},
    )

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid file data")


def test_receive_stores_record_and_returns_id(storage_client: TestClient) -> None:
    response = _receive(storage_client)

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "File stored successfully"
    assert isinstance(payload["fileId"], int)
    assert payload["fileId"] != 0


def test_receive_accepts_pascal_case_fields(storage_client: TestClient) -> None:
    response = storage_client.post(
        "/ReceiveProcessedFile",
        json={"FileName": "legacy", "FileContent": "{}"},
        headers={"ApiKey": API_KEY},
    )

    assert response.status_code == 200
    record = storage_client.get(f"/{response.json()['fileId']}").json()
    assert record["fileName"] == "legacy"


def test_round_trip_get_and_download(storage_client: TestClient) -> None:
    file_id = _receive(storage_client, file_name="file1").json()["fileId"]

    record = storage_client.get(f"/{file_id}")
    assert record.status_code == 200
    body = record.json()
    assert set(body) == {"id", "fileName", "processedDate", "fileContent"}
    assert body["id"] == file_id
    assert body["fileName"] == "file1"
    assert body["fileContent"] == CONTENT
    assert body["processedDate"]

    download = storage_client.get(f"/{file_id}/download")
    assert download.status_code == 200
    assert download.headers["content-type"] == "application/json"
    assert download.headers["content-disposition"] == 'attachment; filename="file1.json"'
    assert download.content == CONTENT.encode("utf-8")


def test_list_returns_all_records(storage_client: TestClient) -> None:
    first = _receive(storage_client, file_name="file1", content="{}").json()["fileId"]
    second = _receive(storage_client, file_name="file2", content="{}").json()["fileId"]

    response = storage_client.get("/")

    assert response.status_code == 200
    records = response.json()
    assert [record["id"] for record in records] == [first, second]
    assert [record["fileName"] for record in records] == ["file1", "file2"]
    assert response.json() == storage_client.get("/").json()


def test_unknown_ids_are_not_found(storage_client: TestClient) -> None:
    assert storage_client.get("/1").status_code == 404
    assert storage_client.get("/1/download").status_code == 404
    assert storage_client.delete("/1").status_code == 404


def test_delete_removes_record_and_second_delete_is_not_found(storage_client: TestClient) -> None:
    file_id = _receive(storage_client).json()["fileId"]

    first = storage_client.delete(f"/{file_id}")
    assert first.status_code == 204
    assert first.content == b""

    assert storage_client.get(f"/{file_id}").status_code == 404
    second = storage_client.delete(f"/{file_id}")
    assert second.status_code == 404


def test_ids_are_not_reused_after_delete(storage_client: TestClient) -> None:
    first = _receive(storage_client).json()["fileId"]
    assert storage_client.delete(f"/{first}").status_code == 204

    second = _receive(storage_client).json()["fileId"]

    assert second > first


def test_concurrent_receives_yield_distinct_ids(storage_client: TestClient) -> None:
    from xmlrelay.main import storage_app

    def _send(index: int) -> int:
        client = TestClient(storage_app)
        response = _receive(client, file_name=f"test{index}")
        assert response.status_code == 200
        return response.json()["fileId"]

    with ThreadPoolExecutor(max_workers=10) as pool:
        ids = list(pool.map(_send, range(100)))

    assert len(set(ids)) == 100
    assert len(storage_client.get("/").json()) == 100


def test_health_names_the_service(storage_client: TestClient) -> None:
    response = storage_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "service": "storage"}


def test_receive_rejects_content_that_is_not_json(storage_client: TestClient) -> None:
    response = _receive(storage_client, file_name="x", content="<not json at all")

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid file data")
    assert storage_client.get("/").json() == []
