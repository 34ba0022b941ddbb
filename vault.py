"""
vault.py - The Vault

Durable home of the latest snapshot. The in-memory snapshot is what readers
see; the blob store only exists so a restart does not begin empty.
"""

import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

import config
from errors import PersistenceFailure
from logger import setup_logger
from models import Snapshot

logger = setup_logger(__name__)


class BlobStore(ABC):
    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """Store data under key, replacing whatever was there"""
        pass

    @abstractmethod
    def read(self, key: str) -> Optional[bytes]:
        """Bytes stored under key, None when the key was never written"""
        pass


class LocalBlobStore(BlobStore):
    """Files under a root directory. Writes go through a temp file and a rename."""

    def __init__(self, root: str = config.DATA_DIR):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / key

    def write(self, key: str, data: bytes) -> None:
        path = self._path(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            raise PersistenceFailure(f"Cannot write {path}: {e}") from e

    def read(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceFailure(f"Cannot read {path}: {e}") from e


class R2BlobStore(BlobStore):
    """Cloudflare R2 (S3 API) bucket."""

    def __init__(self, bucket: str = config.R2_BUCKET, client=None):
        self.bucket = bucket
        self.s3 = client or boto3.client(
            "s3",
            endpoint_url=config.R2_ENDPOINT,
            aws_access_key_id=config.R2_ACCESS_KEY,
            aws_secret_access_key=config.R2_SECRET_KEY,
            config=Config(signature_version="s3v4"),
        )

    def write(self, key: str, data: bytes) -> None:
        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType="application/json")
        except (BotoCoreError, ClientError) as e:
            raise PersistenceFailure(f"R2 upload of {key} failed: {e}") from e

    def read(self, key: str) -> Optional[bytes]:
        try:
            obj = self.s3.get_object(Bucket=self.bucket, Key=key)
            return obj["Body"].read()
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            raise PersistenceFailure(f"R2 download of {key} failed: {e}") from e
        except BotoCoreError as e:
            raise PersistenceFailure(f"R2 download of {key} failed: {e}") from e


def build_blob_store() -> BlobStore:
    """R2 when every credential is configured, local files otherwise."""
    if config.r2_configured():
        logger.info("Snapshot vault: R2", extra={"event": "vault_selected", "key": config.R2_BUCKET})
        return R2BlobStore()
    logger.info("Snapshot vault: local disk", extra={"event": "vault_selected", "key": config.DATA_DIR})
    return LocalBlobStore()


def archive_key(snapshot: Snapshot) -> str:
    """snapshots/2026/10/snapshot_run_20261017_0330_ab12.json"""
    stamp = snapshot.last_updated
    date_path = stamp.strftime("%Y/%m") if stamp else "undated"
    return f"snapshots/{date_path}/snapshot_{snapshot.run_id or 'manual'}.json"


class SnapshotStore:
    """
    Owns the snapshot readers see.

    current() never blocks: it returns whichever complete snapshot is
    installed. replace() is serialized so only one writer persists at a time.
    """

    def __init__(self, blob_store: BlobStore, key: str = config.SNAPSHOT_KEY, archive: bool = config.ARCHIVE_SNAPSHOTS):
        self.blob_store = blob_store
        self.key = key
        self.archive = archive
        self._snapshot = Snapshot()
        self._write_lock = threading.Lock()

    def current(self) -> Snapshot:
        return self._snapshot

    def load(self) -> Optional[Snapshot]:
        """Install the persisted snapshot, if a readable one exists."""
        try:
            raw = self.blob_store.read(self.key)
        except PersistenceFailure as e:
            logger.warning(f"Snapshot load failed, starting empty: {e}", extra={
                "event": "snapshot_load_failed",
                "key": self.key,
                "error": str(e),
            })
            return None

        if raw is None:
            logger.info("No cached snapshot found", extra={"event": "snapshot_missing", "key": self.key})
            return None

        try:
            snapshot = Snapshot.model_validate_json(raw)
        except ValidationError as ve:
            logger.warning(f"Cached snapshot is malformed: {ve.error_count()} errors", extra={
                "event": "snapshot_malformed",
                "key": self.key,
                "error": str(ve),
            })
            return None

        with self._write_lock:
            self._snapshot = snapshot
        logger.info("Loaded cached snapshot", extra={
            "event": "snapshot_loaded",
            "run_id": snapshot.run_id,
            "game_count": snapshot.total_games(),
        })
        return snapshot

    def replace(self, snapshot: Snapshot) -> bool:
        """
        Swap in a new snapshot, then persist it.
        Returns False when persistence failed; the swap stands either way.
        """
        with self._write_lock:
            self._snapshot = snapshot
            return self._persist(snapshot)

    def _persist(self, snapshot: Snapshot) -> bool:
        payload = snapshot.model_dump_json(indent=2).encode("utf-8")
        try:
            self.blob_store.write(self.key, payload)
            if self.archive:
                self.blob_store.write(archive_key(snapshot), payload)
        except PersistenceFailure as e:
            logger.error(f"Snapshot persist failed, serving in-memory copy: {e}", extra={
                "event": "snapshot_persist_failed",
                "run_id": snapshot.run_id,
                "key": self.key,
                "error": str(e),
            })
            return False
        logger.info("Snapshot persisted", extra={
            "event": "snapshot_persisted",
            "run_id": snapshot.run_id,
            "key": self.key,
        })
        return True
