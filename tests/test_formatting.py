"""
Unit tests for orchestrator/formatting.py.
"""

from orchestrator.formatting import (
    format_pool_info,
    format_tool_results,
    format_transaction_result,
    output_contains_tool_data,
    truncate_address,
)
from orchestrator.models import ToolInvocationRecord


POOLS = {
    "chain": "west",
    "pool_count": 2,
    "pools": [
        {"id": 12, "state": "Open", "points": "1200", "member_count": 41,
         "roles": {"depositor": "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY", "root": None, "nominator": None}},
        {"id": 13, "state": "Blocked", "points": "99", "member_count": 58, "roles": None},
    ],
    "message": "Found 2 nomination pool(s).",
}


def ok(name, output):
    return ToolInvocationRecord(name=name, success=True, output=output)


def test_truncate_address():
    assert truncate_address("5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY") == "5GrwvaEF...GKutQY"
    assert truncate_address("short") == "short"
    assert truncate_address(None) is None


def test_pool_ids_or_member_counts_count_as_referenced():
    records = [ok("list_nomination_pools", POOLS)]

    assert output_contains_tool_data("Pool 12 looks healthy.", records)
    assert output_contains_tool_data("One pool has 58 members.", records)
    assert not output_contains_tool_data("There are some pools available.", records)


def test_camel_case_member_count_is_understood():
    records = [ok("list_nomination_pools", {"pools": [{"id": 70, "memberCount": 9}]})]

    assert output_contains_tool_data("nine... no, 9 members", records)
    assert not output_contains_tool_data("no numbers here", records)


def test_other_tools_and_failures_never_trigger_the_heuristic():
    records = [
        ok("check_user_pool", {"joined": True, "pool_id": 5}),
        ToolInvocationRecord(name="list_nomination_pools", success=False, error="chain not initialized"),
        ok("list_nomination_pools", {"pools": []}),
    ]

    assert output_contains_tool_data("nothing relevant", records)


def test_format_pool_info():
    text = format_pool_info(POOLS)

    assert text.startswith("**Nomination Pools Information**")
    assert "Found **2** pool(s) on **west**" in text
    assert "**Pool #12**\n- State: Open\n- Members: 41\n- Points: 1200\n- Depositor: 5GrwvaEF...GKutQY\n" in text
    assert "**Pool #13**" in text
    assert text.rstrip().endswith("*Found 2 nomination pool(s).*")


def test_format_pool_info_empty_and_error_shapes():
    assert format_pool_info(None) == "No pool information available."
    assert format_pool_info({"chain": "polkadot", "pools": []}).endswith("No nomination pools found on polkadot.")

    text = format_pool_info({"error": "pallet missing", "hint": "use a relay chain"})
    assert "**Error:** pallet missing" in text
    assert "*Hint: use a relay chain*" in text


def test_format_transaction_result():
    receipt = {
        "status": "finalized",
        "block_hash": "0x" + "ab" * 32,
        "tx_hash": "0x" + "cd" * 32,
        "events": [{}, {}],
    }

    text = format_transaction_result(receipt)

    assert text == (
        "- Status: finalized\n"
        "- Block Hash: 0xababab...ababab\n"
        "- Tx Hash: 0xcdcdcd...cdcdcd\n"
        "- Events: 2 event(s)\n"
    )
    assert format_transaction_result(None) == "Transaction completed."
    assert format_transaction_result({"foo": 1}).startswith("```json")


def test_format_tool_results_renders_each_record_in_order():
    records = [
        ok("join_pool", {"status": "finalized"}),
        ToolInvocationRecord(name="unbond", success=False, error="only 1 WND bonded"),
        ok("ensure_chain_api", {"success": True}),
        ok("claim_rewards", {"status": "finalized"}),
    ]

    text = format_tool_results(records)

    assert text.startswith("**Pool Joined Successfully!**\n- Status: finalized\n")
    markers = [
        "**Pool Joined Successfully!**",
        "**Error in unbond:** only 1 WND bonded",
        "**Ensure Chain Api Result:**\n```json",
        "**Rewards Claimed!**",
    ]
    positions = [text.index(m) for m in markers]
    assert positions == sorted(positions)
