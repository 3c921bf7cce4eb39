"""
Step definitions for Cloud DNS Manager integration tests.
"""

from unittest.mock import patch

from behave import given, then, when

from clouddns.core.dns_manager import DNSManager


def _records(context, record_type=None):
    _, records = context.dns_manager.record_manager.list_records(context.zone, record_type)
    return records


def _find(context, record_type, name):
    _, record = context.dns_manager.record_manager.find_record(context.zone, record_type, name)
    return record


@given("the DNS manager is configured with the mock provider")
def step_impl(context):
    """Configure the DNS manager with the in-memory provider."""
    context.dns_manager = DNSManager(context.test_config, output=context.console)
    assert context.dns_manager is not None
    assert context.dns_manager.dns_client is not None
    assert context.dns_manager.provider_name == "mock"


@given("the DNS manager is configured from the config file")
def step_impl(context):
    context.dns_manager = DNSManager(str(context.test_config_file), output=context.console)
    assert context.dns_manager.provider_name == "mock"


@given('I am managing the zone "{zone}"')
def step_impl(context, zone):
    context.zone = zone


@given("the zone has the following records")
def step_impl(context):
    """Create records from the scenario table."""
    for row in context.table:
        ok = context.dns_manager.set_record(
            context.zone, row["type"], row["name"], row["value"], int(row["ttl"])
        )
        assert ok, f"Failed to create {row['type']} {row['name']}"
    context.output.truncate(0)
    context.output.seek(0)


@when("I list the zones")
def step_impl(context):
    context.result = context.dns_manager.list_zones()


@when("I list the records")
def step_impl(context):
    context.result = context.dns_manager.list_records(context.zone)


@when('I list the "{record_type}" records')
def step_impl(context, record_type):
    context.result = context.dns_manager.list_records(context.zone, record_type)


@when('I set a "{record_type}" record "{name}" to "{value}"')
def step_impl(context, record_type, name, value):
    context.result = context.dns_manager.set_record(context.zone, record_type, name, value)


@when('I set a "{record_type}" record "{name}" to "{value}" with TTL {ttl:d}')
def step_impl(context, record_type, name, value, ttl):
    context.result = context.dns_manager.set_record(context.zone, record_type, name, value, ttl)


@when('I set a "{record_type}" record "{name}" to "{value}" with priority {priority:d}')
def step_impl(context, record_type, name, value, priority):
    context.result = context.dns_manager.set_record(
        context.zone, record_type, name, value, extras={"priority": priority}
    )


@when('I delete the "{record_type}" record "{name}" without confirmation')
def step_impl(context, record_type, name):
    context.result = context.dns_manager.delete_record(
        context.zone, record_type, name, force=True, yes=True
    )


@when('I delete the "{record_type}" record "{name}" typing "{typed}" and answering "{answer}"')
def step_impl(context, record_type, name, typed, answer):
    with patch("clouddns.core.dns_manager.Prompt.ask", return_value=typed), patch(
        "clouddns.core.dns_manager.Confirm.ask", return_value=answer == "yes"
    ):
        context.result = context.dns_manager.delete_record(context.zone, record_type, name)


@then("the command should succeed")
def step_impl(context):
    assert context.result is True, f"Command failed:\n{context.output.getvalue()}"


@then("the command should fail")
def step_impl(context):
    assert context.result is False, f"Command unexpectedly succeeded:\n{context.output.getvalue()}"


@then('the output should contain "{text}"')
def step_impl(context, text):
    output = context.output.getvalue()
    assert text in output, f"'{text}' not found in output:\n{output}"


@then('the output should not contain "{text}"')
def step_impl(context, text):
    output = context.output.getvalue()
    assert text not in output, f"'{text}' unexpectedly found in output:\n{output}"


@then('the "{record_type}" record "{name}" should have value "{value}"')
def step_impl(context, record_type, name, value):
    record = _find(context, record_type, name)
    assert record is not None, f"{record_type} record {name} not found"
    assert record.value == value, f"Expected {value}, got {record.value}"


@then('the "{record_type}" record "{name}" should have TTL {ttl:d}')
def step_impl(context, record_type, name, ttl):
    record = _find(context, record_type, name)
    assert record is not None, f"{record_type} record {name} not found"
    assert record.ttl == ttl, f"Expected TTL {ttl}, got {record.ttl}"


@then('the "{record_type}" record "{name}" should not exist')
def step_impl(context, record_type, name):
    assert _find(context, record_type, name) is None, f"{record_type} record {name} still exists"


@then('the "{record_type}" record "{name}" should exist')
def step_impl(context, record_type, name):
    assert _find(context, record_type, name) is not None, f"{record_type} record {name} not found"


@then("the zone should have {count:d} records")
def step_impl(context, count):
    records = _records(context)
    assert len(records) == count, f"Expected {count} records, found {len(records)}"
