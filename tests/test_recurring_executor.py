from datetime import date, datetime, timedelta

import pytest

from services.recurring_executor import RecurringExecutor, RuleDecision, evaluate, next_run_date


@pytest.fixture
def executor(rule_repo):
    return RecurringExecutor(repo=rule_repo)


# ── evaluate ──────────────────────────────────────────────

def test_rule_not_started_before_start_date(make_rule):
    rule = make_rule(start_date=date(2024, 3, 1))
    assert evaluate(rule, date(2024, 2, 29)) == (RuleDecision.NOT_STARTED, None)


def test_rule_window_closed_after_end_date(make_rule):
    rule = make_rule(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31), frequency="daily")
    assert evaluate(rule, date(2024, 2, 1)) == (RuleDecision.WINDOW_CLOSED, None)


def test_end_date_is_inclusive(make_rule):
    rule = make_rule(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31), frequency="daily")
    decision, next_run = evaluate(rule, date(2024, 1, 31))
    assert decision is RuleDecision.DUE
    assert next_run == date(2024, 1, 2)


def test_never_run_rule_is_due_one_interval_after_start(make_rule):
    rule = make_rule(frequency="weekly", start_date=date(2024, 1, 1))
    assert evaluate(rule, date(2024, 1, 7)) == (RuleDecision.NOT_DUE, date(2024, 1, 8))
    assert evaluate(rule, date(2024, 1, 8)) == (RuleDecision.DUE, date(2024, 1, 8))


def test_next_run_counts_from_last_execution(make_rule):
    rule = make_rule(frequency="daily", interval=3, last_executed_at=date(2024, 2, 10))
    assert next_run_date(rule) == date(2024, 2, 13)


def test_next_run_strips_time_of_day(make_rule):
    rule = make_rule(frequency="daily", start_date=datetime(2024, 1, 1, 18, 30))
    assert next_run_date(rule) == date(2024, 1, 2)


def test_unknown_frequency_is_invalid(make_rule):
    rule = make_rule(frequency="hourly")
    assert evaluate(rule, date(2024, 6, 1)) == (RuleDecision.INVALID, None)


# ── run_for ───────────────────────────────────────────────

def test_monthly_catch_up_collapses_to_single_entry(executor, make_rule, ledger, rule_repo):
    rule = make_rule(frequency="monthly", interval=1, start_date=date(2024, 1, 15),
                     amount=1000.0, type="expense", category="Rent")

    created = executor.run_for(1, date(2024, 3, 20))

    assert len(created) == 1
    entry = created[0]
    assert entry.amount == 1000.0
    assert entry.category == "Rent"
    assert entry.date == date(2024, 3, 20)
    assert rule_repo.rules[rule.id].last_executed_at == date(2024, 3, 20)
    assert len(ledger.rows) == 1


def test_daily_rule_after_ten_days_creates_one_entry(executor, make_rule, ledger, rule_repo):
    d0 = date(2024, 5, 1)
    rule = make_rule(frequency="daily", start_date=d0)

    created = executor.run_for(1, d0 + timedelta(days=10))

    assert [e.date for e in created] == [d0 + timedelta(days=10)]
    assert rule_repo.rules[rule.id].last_executed_at == d0 + timedelta(days=10)


def test_second_run_on_same_day_creates_nothing(executor, make_rule, ledger):
    make_rule(frequency="daily", start_date=date(2024, 5, 1))

    first = executor.run_for(1, date(2024, 5, 5))
    second = executor.run_for(1, date(2024, 5, 5))

    assert len(first) == 1
    assert second == []
    assert len(ledger.rows) == 1


def test_missed_periods_drip_out_one_per_run(executor, make_rule, ledger):
    make_rule(frequency="weekly", start_date=date(2024, 1, 1))

    assert len(executor.run_for(1, date(2024, 2, 5))) == 1
    # Marker moved to Feb 5, so the next occurrence is a week later.
    assert executor.run_for(1, date(2024, 2, 11)) == []
    assert len(executor.run_for(1, date(2024, 2, 12))) == 1
    assert [e.date for e in ledger.rows] == [date(2024, 2, 5), date(2024, 2, 12)]


def test_closed_window_produces_nothing(executor, make_rule, ledger, rule_repo):
    rule = make_rule(frequency="daily", start_date=date(2024, 1, 1), end_date=date(2024, 1, 10))

    assert executor.run_for(1, date(2024, 1, 11)) == []
    assert ledger.rows == []
    # Still active, just inert.
    assert rule_repo.rules[rule.id].status == "active"


def test_paused_rule_is_never_processed(executor, make_rule, ledger):
    make_rule(frequency="daily", start_date=date(2020, 1, 1), status="paused")

    assert executor.run_for(1, date(2024, 1, 1)) == []
    assert ledger.rows == []


def test_generated_entry_copies_rule_fields(executor, make_rule):
    rule = make_rule(title="Salary", type="income", category="Job", amount=2500.0,
                     payment_method="bank_transfer", frequency="monthly", start_date=date(2024, 1, 1))

    entry = executor.run_for(1, date(2024, 2, 1))[0]

    assert entry.description == "Salary"
    assert entry.type == "income"
    assert entry.payment_method == "bank_transfer"
    assert entry.is_recurring is True
    assert entry.recurring_id == rule.id


def test_entry_is_dated_run_day_not_scheduled_day(executor, make_rule):
    make_rule(frequency="monthly", start_date=date(2024, 1, 1))
    entry = executor.run_for(1, date(2024, 2, 17))[0]
    assert entry.date == date(2024, 2, 17)


def test_run_day_time_component_is_dropped(executor, make_rule, rule_repo):
    rule = make_rule(frequency="daily", start_date=date(2024, 1, 1))
    executor.run_for(1, datetime(2024, 1, 5, 23, 59))
    assert rule_repo.rules[rule.id].last_executed_at == date(2024, 1, 5)


def test_only_the_given_users_rules_run(executor, make_rule, ledger):
    make_rule(user_id=1, frequency="daily", start_date=date(2024, 1, 1))
    make_rule(user_id=2, frequency="daily", start_date=date(2024, 1, 1))

    executor.run_for(1, date(2024, 1, 5))

    assert {e.user_id for e in ledger.rows} == {1}


def test_failing_rule_does_not_stop_the_others(executor, make_rule, rule_repo, ledger):
    broken = make_rule(title="Broken", frequency="daily", start_date=date(2024, 1, 1))
    healthy = make_rule(title="Gym", frequency="daily", start_date=date(2024, 1, 1))
    rule_repo.fail_ids.add(broken.id)

    created = executor.run_for(1, date(2024, 1, 5))

    assert [e.recurring_id for e in created] == [healthy.id]
    assert rule_repo.rules[broken.id].last_executed_at is None


def test_failed_rule_is_retried_on_next_run(executor, make_rule, rule_repo):
    rule = make_rule(frequency="daily", start_date=date(2024, 1, 1))
    rule_repo.fail_ids.add(rule.id)
    assert executor.run_for(1, date(2024, 1, 5)) == []

    rule_repo.fail_ids.clear()
    assert len(executor.run_for(1, date(2024, 1, 5))) == 1


def test_store_unavailable_returns_empty_without_raising(executor, rule_repo, make_rule):
    make_rule(frequency="daily", start_date=date(2024, 1, 1))
    rule_repo.fail_load = True
    assert executor.run_for(1, date(2024, 1, 5)) == []


def test_invalid_frequency_is_skipped(executor, make_rule, ledger):
    make_rule(frequency="fortnightly", start_date=date(2024, 1, 1))
    good = make_rule(frequency="daily", start_date=date(2024, 1, 1))

    created = executor.run_for(1, date(2024, 1, 5))

    assert [e.recurring_id for e in created] == [good.id]


def test_stale_marker_loses_the_race(executor, make_rule, rule_repo, ledger):
    rule = make_rule(frequency="daily", start_date=date(2024, 1, 1))
    stale_copy = rule_repo.get_by_id(rule.id, 1)

    executor.run_for(1, date(2024, 1, 5))
    # A concurrent run that read the rule before the marker moved.
    from services.recurring_executor import build_occurrence
    assert rule_repo.record_execution(stale_copy, build_occurrence(stale_copy, date(2024, 1, 5))) is None
    assert len(ledger.rows) == 1


def test_deleted_rule_is_not_acted_on(executor, make_rule, rule_repo, ledger):
    rule = make_rule(frequency="daily", start_date=date(2024, 1, 1))
    rule_repo.delete(rule.id, 1)
    assert executor.run_for(1, date(2024, 1, 5)) == []
    assert ledger.rows == []


def test_run_for_all_sweeps_each_user_once(executor, make_rule, ledger):
    make_rule(user_id=1, frequency="daily", start_date=date(2024, 1, 1))
    make_rule(user_id=2, frequency="daily", start_date=date(2024, 1, 1))
    make_rule(user_id=3, frequency="daily", start_date=date(2024, 1, 1), status="paused")

    assert executor.run_for_all(date(2024, 1, 5)) == 2
    assert executor.run_for_all(date(2024, 1, 5)) == 0
    assert sorted(e.user_id for e in ledger.rows) == [1, 2]
