from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from app.services.storage import LocalStorage, S3Storage, StorageError


def test_local_storage_round_trip(tmp_path):
    storage = LocalStorage(root=str(tmp_path), public_url="http://localhost:8000/storage/")

    key = storage.put("lessons/1/intro.mp4", b"\x00\x01")

    assert (tmp_path / "lessons" / "1" / "intro.mp4").read_bytes() == b"\x00\x01"
    assert storage.url(key) == "http://localhost:8000/storage/lessons/1/intro.mp4"

    storage.delete(key)
    assert not (tmp_path / "lessons" / "1" / "intro.mp4").exists()


def test_local_storage_rejects_keys_outside_root(tmp_path):
    storage = LocalStorage(root=str(tmp_path), public_url="http://localhost")
    with pytest.raises(StorageError):
        storage.put("../escape.txt", b"x")


def test_resolve_passes_absolute_urls_through(tmp_path):
    storage = LocalStorage(root=str(tmp_path), public_url="http://localhost")
    assert storage.resolve(None) is None
    assert storage.resolve("https://cdn.example.com/a.mp4") == "https://cdn.example.com/a.mp4"
    assert storage.resolve("a.mp4") == "http://localhost/a.mp4"


def test_s3_storage_uses_bucket_keys():
    client = MagicMock()
    storage = S3Storage(bucket_name="media", region="eu-west-1", client=client)

    storage.put("videos/end.mp4", b"data")
    storage.delete("videos/end.mp4")

    client.put_object.assert_called_once_with(
        Bucket="media", Key="videos/end.mp4", Body=b"data", ContentType="video/mp4"
    )
    client.delete_object.assert_called_once_with(Bucket="media", Key="videos/end.mp4")
    assert storage.url("videos/end.mp4") == "https://media.s3.eu-west-1.amazonaws.com/videos/end.mp4"


def test_s3_storage_wraps_client_errors():
    client = MagicMock()
    client.put_object.side_effect = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
    storage = S3Storage(bucket_name="media", region="eu-west-1", client=client)

    with pytest.raises(StorageError):
        storage.put("videos/end.mp4", b"data")
