"""Cache keys and tags for job applications.

Every entry is visible to exactly one side, so every key and tag carries the
candidate id or the recruiter id that owns the posting.

Application keys:
    applications|candidate|list|<cid>|<page>|<limit>          tagged candidate_list_tag(cid)
    applications|candidate|detail|<cid>|<app id>
    applications|recruiter|list|<rid>|<job id>|<page>|<limit> tagged recruiter_list_tag(rid)
    applications|recruiter|detail|<rid>|<app id>              tagged recruiter_detail_tag(rid)
    applications|recruiter|notes|<rid>|<app id>               tagged recruiter_detail_tag(rid)
    applications|recruiter|events|<rid>|<app id>              tagged recruiter_detail_tag(rid)

Every HTTP response served to a candidate is tracked under
``http_candidate_tag(cid)``; every one served to a recruiter under
``http_recruiter_tag(rid)``.
"""

from __future__ import annotations

from jobboard_service.infra.cache.keys import build_key

APPLICATIONS_PATH = "/job-application"
CANDIDATE_PATH = f"{APPLICATIONS_PATH}/my-applications"

APPLICATION_TTL = 300


def candidate_list_tag(candidate_id: str) -> str:
    return build_key("idx", "applications", "candidate", "list", candidate_id)


def http_candidate_tag(candidate_id: str) -> str:
    return build_key("idx", "http", "applications", "candidate", candidate_id)


def recruiter_list_tag(recruiter_id: str) -> str:
    return build_key("idx", "applications", "recruiter", "list", recruiter_id)


def recruiter_detail_tag(recruiter_id: str) -> str:
    return build_key("idx", "applications", "recruiter", "detail", recruiter_id)


def http_recruiter_tag(recruiter_id: str) -> str:
    return build_key("idx", "http", "applications", "recruiter", recruiter_id)


def candidate_list_key(candidate_id: str, page: int, limit: int) -> str:
    return build_key("applications", "candidate", "list", candidate_id, page, limit)


def candidate_detail_key(candidate_id: str, application_id: int) -> str:
    return build_key("applications", "candidate", "detail", candidate_id, application_id)


def recruiter_list_key(recruiter_id: str, job_id: int, page: int, limit: int) -> str:
    return build_key("applications", "recruiter", "list", recruiter_id, job_id, page, limit)


def recruiter_detail_key(recruiter_id: str, application_id: int) -> str:
    return build_key("applications", "recruiter", "detail", recruiter_id, application_id)


def recruiter_notes_key(recruiter_id: str, application_id: int) -> str:
    return build_key("applications", "recruiter", "notes", recruiter_id, application_id)


def recruiter_events_key(recruiter_id: str, application_id: int) -> str:
    return build_key("applications", "recruiter", "events", recruiter_id, application_id)
