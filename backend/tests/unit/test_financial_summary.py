from decimal import Decimal

from familyhub.domain.contributions.models import FinancialPeriodSummary, FinancialSummary


def test_cancelled_amounts_are_reported_but_not_totalled():
    summary = FinancialSummary.from_buckets(
        [
            ("completed", "monthly", Decimal("100")),
            ("cancelled", "monthly", Decimal("50")),
            ("pending", "event", Decimal("25")),
        ]
    )

    assert summary.total_contributions == Decimal("125")
    assert summary.total_cancelled == Decimal("50")
    assert summary.total_pending == Decimal("25")
    assert summary.total_completed == Decimal("100")
    assert summary.monthly_contributions == Decimal("100")
    assert summary.event_contributions == Decimal("25")
    assert summary.project_contributions == Decimal("0")


def test_empty_summary_is_all_zero():
    summary = FinancialSummary.from_buckets([])
    assert summary.total_contributions == Decimal("0")
    assert summary.other_contributions == Decimal("0")


def test_period_fold_keeps_order_and_splits_by_status():
    periods = FinancialPeriodSummary.fold(
        [
            ("2024-03", "completed", 40),
            ("2024-03", "pending", "10.50"),
            ("2024-02", "cancelled", 99),
            ("2024-02", "refunded", 5),
        ]
    )

    assert [p.period for p in periods] == ["2024-03", "2024-02"]
    assert periods[0].total_amount == Decimal("50.50")
    assert periods[0].completed_amount == Decimal("40")
    assert periods[0].pending_amount == Decimal("10.50")
    assert periods[1].total_amount == Decimal("5")
