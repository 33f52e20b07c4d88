"""Usage gate tests."""

from __future__ import annotations

import pytest

from codescribe.errors import UsageDeniedError
from codescribe.usage import AllowAllUsageGate, QuotaUsageGate, UsageAction, ensure_allowed


def test_allow_all_records_events() -> None:
    gate = AllowAllUsageGate()

    ensure_allowed(gate, UsageAction.ANALYSIS, project_name="shop", file_count=3)
    gate.record_usage(UsageAction.ANALYSIS, project_name="shop", file_count=3)

    assert gate.events == [(UsageAction.ANALYSIS, "shop", 3)]


def test_quota_counts_each_action_separately() -> None:
    gate = QuotaUsageGate(1)

    assert gate.is_allowed(UsageAction.ANALYSIS, project_name=None, file_count=0)
    gate.record_usage(UsageAction.ANALYSIS, project_name=None, file_count=0)

    assert gate.used(UsageAction.ANALYSIS) == 1
    assert not gate.is_allowed(UsageAction.ANALYSIS, project_name=None, file_count=0)
    assert gate.is_allowed(UsageAction.EXPORT, project_name=None, file_count=0)


def test_negative_quota_is_rejected() -> None:
    with pytest.raises(ValueError):
        QuotaUsageGate(-1)


def test_ensure_allowed_raises_with_action() -> None:
    with pytest.raises(UsageDeniedError) as excinfo:
        ensure_allowed(QuotaUsageGate(0), UsageAction.EXPORT, project_name="shop")

    assert excinfo.value.action == "export"
    assert str(excinfo.value) == "Usage limit reached: 'export' is not permitted for 'shop'"
