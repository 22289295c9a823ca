"""Cache keys and tags for job postings.

Application keys:
    jobs|public|list|<filters>|page=..|limit=..   tagged PUBLIC_LIST_TAG
    jobs|public|detail|<id or slug>               tagged PUBLIC_DETAIL_TAG
    jobs|recruiter|list|<rid>|<page>|<limit>     tagged recruiter_list_tag(rid)
    jobs|recruiter|detail|<rid>|<job id>         tagged recruiter_detail_tag(rid)

HTTP keys served by the response cache are tagged with the ``idx|http|...``
counterparts so writes drop them too. Public detail responses are tagged
per job with ``http_public_detail_tag`` and all together with
``HTTP_PUBLIC_DETAIL_TAG``. The detail tags let company writes, which change
the embedded company name, drop every posting of the company at once.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jobboard_service.infra.cache.keys import build_key

PUBLIC_LIST_PATH = "/job-posting/public"

PUBLIC_LIST_TAG = build_key("idx", "jobs", "public", "list")
HTTP_PUBLIC_LIST_TAG = build_key("idx", "http", "jobs", "public", "list")
PUBLIC_DETAIL_TAG = build_key("idx", "jobs", "public", "detail")
HTTP_PUBLIC_DETAIL_TAG = build_key("idx", "http", "jobs", "public", "detail")

PUBLIC_LIST_TTL = 60
PUBLIC_DETAIL_TTL = 120
RECRUITER_TTL = 300


def public_list_key(filter_segments: list[str], page: int, limit: int) -> str:
    return build_key("jobs", "public", "list", *filter_segments, f"page={page}", f"limit={limit}")


def public_detail_key(identifier: int | str) -> str:
    return build_key("jobs", "public", "detail", identifier)


def recruiter_list_key(recruiter_id: str, page: int, limit: int) -> str:
    return build_key("jobs", "recruiter", "list", recruiter_id, page, limit)


def recruiter_detail_key(recruiter_id: str, job_id: int) -> str:
    return build_key("jobs", "recruiter", "detail", recruiter_id, job_id)


def recruiter_list_tag(recruiter_id: str) -> str:
    return build_key("idx", "jobs", "recruiter", "list", recruiter_id)


def recruiter_detail_tag(recruiter_id: str) -> str:
    return build_key("idx", "jobs", "recruiter", "detail", recruiter_id)


def http_recruiter_list_tag(recruiter_id: str) -> str:
    return build_key("idx", "http", "jobs", "recruiter", "list", recruiter_id)


def http_recruiter_detail_tag(recruiter_id: str) -> str:
    return build_key("idx", "http", "jobs", "recruiter", "detail", recruiter_id)


def http_public_detail_tag(job_id: int) -> str:
    return build_key("idx", "http", "jobs", "public", "detail", job_id)


def filter_segments(filters: Mapping[str, Any]) -> list[str]:
    """``name=value`` segments for the non-empty filters, in the given order.

    Labelling each value keeps ``location=berlin`` and ``query=berlin`` apart.
    """
    segments = []
    for name, value in filters.items():
        text = build_key(value)
        if text:
            segments.append(f"{name}={text}")
    return segments
