from __future__ import annotations

import os
import secrets
from datetime import datetime, timezone
from typing import Mapping


def new_correlation_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return f"ufl_{stamp}_{secrets.token_hex(4)}"


def workflow_run_correlation_id(env: Mapping[str, str] | None = None) -> str:
    """
    Stable id for events of one workflow run attempt.

    Inside GitHub Actions this is derived from the repository, run id and run
    attempt so retries of the same workflow can be told apart. Outside CI a
    fresh id is generated.
    """
    src = os.environ if env is None else env
    run_id = (src.get("GITHUB_RUN_ID") or "").strip()
    if not run_id:
        return new_correlation_id()
    repo = (src.get("GITHUB_REPOSITORY") or "unknown").strip()
    attempt = (src.get("GITHUB_RUN_ATTEMPT") or "1").strip()
    return f"ufl_{repo.replace('/', '_')}_{run_id}_{attempt}"
