"""Optional JSON record of one backup run."""

import json
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _duration(entry: Dict[str, Any]) -> Optional[float]:
    if not entry.get("started_at") or not entry.get("finished_at"):
        return None
    elapsed = datetime.fromisoformat(entry["finished_at"]) - datetime.fromisoformat(entry["started_at"])
    return elapsed.total_seconds()


class ManifestService:
    """Tracks project outcomes in memory and dumps them once the run is finalized.

    Without a manifest file the service only keeps the in-memory record.
    """

    def __init__(self, manifest_file: Optional[str], logger):
        self.manifest_file = manifest_file
        self.logger = logger
        self.manifest: Dict[str, Any] = {"status": "running", "metadata": {}, "projects": []}

    def start_run(self, run_id: str, metadata: Dict[str, Any]):
        self.manifest.update(run_id=run_id, started_at=_now(), metadata=dict(metadata))

    def set_metadata(self, key: str, value: Any):
        self.manifest["metadata"][key] = value

    def project_started(self, service: str):
        self.manifest["projects"].append({"service": service, "status": "running", "started_at": _now()})

    def project_finished(self, service: str, status: str, container_id=None, command=None, error=None):
        pending = [
            entry
            for entry in self.manifest["projects"]
            if entry["service"] == service and entry["status"] == "running"
        ]
        if not pending:
            return
        entry = pending[-1]
        entry.update(
            status=status,
            finished_at=_now(),
            container_id=container_id,
            command=command,
            error=error,
        )
        entry["duration_seconds"] = _duration(entry)

    def finalize(self, status: str, error: Optional[str] = None):
        self.manifest.update(status=status, finished_at=_now(), error=error)
        self.manifest["duration_seconds"] = _duration(self.manifest)
        self.write()

    def write(self):
        if not self.manifest_file:
            return

        # Dump next to the target, then swap it in so readers never see a partial file.
        target_dir = os.path.dirname(os.path.abspath(self.manifest_file))
        temp_path = None
        try:
            os.makedirs(target_dir, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=target_dir, suffix=".json", delete=False
            ) as handle:
                temp_path = handle.name
                json.dump(self.manifest, handle, indent=2, sort_keys=True)
            os.replace(temp_path, self.manifest_file)
        except OSError as exc:
            self.logger.warning("Manifest %s was not written: %s", self.manifest_file, exc)
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
