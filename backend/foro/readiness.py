"""Readiness checks: config, packages, Firestore."""
import asyncio
import logging

logger = logging.getLogger(__name__)

# Result: (passed: bool, message: str)
CheckResult = tuple[bool, str]
ChecksDict = dict[str, CheckResult]

REQUIRED = ("config", "packages")


def check_config() -> CheckResult:
    """Load settings and read the fields every process needs."""
    try:
        from foro.settings import get_settings
        s = get_settings()
        _ = s.app_name
        _ = s.pending_notifications_collection
        _ = s.fanout_batch_size
        return True, "ok"
    except Exception as e:
        return False, str(e)


def check_packages() -> CheckResult:
    """Import critical modules: fastapi, uvicorn, firebase_admin, foro.main."""
    missing = []
    try:
        import fastapi  # noqa: F401
    except ImportError:
        missing.append("fastapi")
    try:
        import uvicorn  # noqa: F401
    except ImportError:
        missing.append("uvicorn")
    try:
        import firebase_admin  # noqa: F401
    except ImportError:
        missing.append("firebase_admin")
    try:
        import foro.main  # noqa: F401
    except ImportError as e:
        missing.append(f"foro.main ({e})")
    if missing:
        return False, f"missing: {', '.join(missing)}"
    return True, "ok"


async def _check_firestore_async() -> CheckResult:
    from foro.infra.firebase.app import async_firestore_client, init_firebase_app
    from foro.settings import get_settings

    s = get_settings()
    app = init_firebase_app(
        credentials_path=s.google_application_credentials,
        project_id=s.firebase_project_id,
        inline_json=s.google_application_credentials_json,
    )
    client = async_firestore_client(app)
    # Any read proves credentials and connectivity; the document need not exist
    await client.collection(s.pending_notifications_collection).document("_readiness").get()
    return True, "ok"


def check_firestore() -> CheckResult:
    """Check Firestore connectivity with the configured credentials."""
    try:
        return asyncio.run(_check_firestore_async())
    except Exception as e:
        return False, str(e)


def run_all_checks() -> ChecksDict:
    return {
        "config": check_config(),
        "packages": check_packages(),
        "firestore": check_firestore(),
    }


def is_ready(checks: ChecksDict) -> tuple[bool, dict[str, str]]:
    """Ready when every required check passed. Summary maps each check to its message."""
    summary = {name: msg for name, (_, msg) in checks.items()}
    ready = all(checks.get(name, (False, "missing"))[0] for name in REQUIRED)
    return ready, summary
