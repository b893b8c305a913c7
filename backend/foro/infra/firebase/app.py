"""
Firebase app and client construction.

On PaaS hosts a service account key file cannot be uploaded, so the whole
JSON (raw or base64) may be given in GOOGLE_APPLICATION_CREDENTIALS_JSON. It
is written to a temp file and GOOGLE_APPLICATION_CREDENTIALS pointed at it
before the Firebase app is created.
"""
import base64
import json
import logging
import os
import tempfile
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore, firestore_async

logger = logging.getLogger(__name__)


def setup_application_default_credentials(inline_json: Optional[str] = None) -> Optional[str]:
    """
    Point GOOGLE_APPLICATION_CREDENTIALS at a key file built from inline JSON.

    Returns the credentials path in use, or None when neither variable is set.
    """
    existing = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    if existing:
        return existing
    raw = (inline_json or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS_JSON") or "").strip()
    if not raw:
        logger.debug("No inline Google credentials; relying on ambient ADC")
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        try:
            data = json.loads(base64.b64decode(raw).decode("utf-8"))
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning("GOOGLE_APPLICATION_CREDENTIALS_JSON is neither JSON nor base64 JSON: %s", e)
            return None
    if not isinstance(data, dict):
        logger.warning("GOOGLE_APPLICATION_CREDENTIALS_JSON is not a JSON object; skipping ADC setup")
        return None
    fd, path = tempfile.mkstemp(suffix=".json", prefix="gcp-credentials-")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(data, f)
    os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = path
    logger.info("Google Application Default Credentials written to %s", path)
    return path


def init_firebase_app(
    credentials_path: str = "",
    project_id: str = "",
    inline_json: str = "",
) -> firebase_admin.App:
    """Return the default Firebase app, creating it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    path = credentials_path or setup_application_default_credentials(inline_json) or ""
    if path:
        cred = credentials.Certificate(path)
    else:
        cred = credentials.ApplicationDefault()
    options = {"projectId": project_id} if project_id else None
    app = firebase_admin.initialize_app(cred, options)
    logger.info("Firebase app initialized (project=%s)", project_id or "from credentials")
    return app


def async_firestore_client(app: firebase_admin.App):
    """Async Firestore client for repositories."""
    return firestore_async.client(app)


def sync_firestore_client(app: firebase_admin.App):
    """Sync Firestore client; only needed for snapshot listeners."""
    return firestore.client(app)
