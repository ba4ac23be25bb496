"""Model tests: derived fields, lookups, and the serialization boundary."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from dbcview.models import ByteOrder, Message, Network, Signal
from dbcview.parsers import parse_dbc


def make_signal(name: str = "S", **kwargs) -> Signal:
    """Helper to build a Signal with sensible defaults."""
    fields = {
        "name": name,
        "start_bit": 0,
        "length": 8,
        "byte_order": ByteOrder.LITTLE_ENDIAN,
        "is_signed": False,
    }
    fields.update(kwargs)
    return Signal(**fields)


# ---------------------------------------------------------------------------
# Message
# ---------------------------------------------------------------------------


def test_derived_fields_follow_id():
    """pgn / sa / priority are recomputed, not stored."""
    msg = Message(id=0x18FEF100, name="CCVS", dlc=8, node="Engine")
    assert msg.pgn == 0xFEF1
    assert msg.sa == 0x00
    assert msg.priority == 6

    msg.id = 0x0CF00403
    assert msg.pgn == 0xF004
    assert msg.sa == 0x03
    assert msg.priority == 3


def test_hex_id_and_summary():
    msg = Message(id=100, name="EngineData", dlc=8, node="ECU", signals=[make_signal("RPM")])
    assert msg.hex_id == "0x00000064"
    assert "EngineData" in msg.summary
    assert "1 signals" in msg.summary


def test_get_signal_first_match():
    first = make_signal("Dup", start_bit=0)
    second = make_signal("Dup", start_bit=8)
    msg = Message(id=1, name="M", dlc=8, node="N", signals=[first, second])
    assert msg.get_signal("Dup") is first
    assert msg.get_signal("dup") is None


def test_describe_value():
    sig = make_signal(value_descriptions={0: "Off", 1: "On"})
    assert sig.describe_value(1) == "On"
    assert sig.describe_value(7) is None
    assert make_signal().describe_value(0) is None


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


def test_network_lookups():
    network = parse_dbc("BO_ 1 A: 8 ECU\nBO_ 2 B: 8 GW\nBO_ 1 C: 8 ECU\n")
    assert network.get_message(1).name == "A"
    assert network.get_message(3) is None
    assert network.get_message_by_name("C").id == 1
    assert network.nodes == ["ECU", "GW"]


def test_signal_count():
    network = parse_dbc(
        "BO_ 1 A: 8 N\n SG_ X : 0|8@1+ (1,0) [0|1]\n SG_ Y : 8|8@1+ (1,0) [0|1]\n"
        "BO_ 2 B: 8 N\n SG_ Z : 0|8@1+ (1,0) [0|1]\n"
    )
    assert network.signal_count == 3


# ---------------------------------------------------------------------------
# Serialization boundary
# ---------------------------------------------------------------------------

DBC = """\
BO_ 217056256 EEC1: 8 Engine
 SG_ Speed : 24|16@1+ (0.125,0) [0|8031.875]
 SG_ Mode : 0|4@1+ (1,0) [0|15]
CM_ SG_ 217056256 Speed "Engine speed";
VAL_ 217056256 Mode 0 "Off" 15 "N/A" ;
BO_ 100 Plain: 2 Body
"""


def test_to_dict_is_field_labeled():
    data = parse_dbc(DBC).to_dict()
    msg = data["messages"][0]
    assert msg["id"] == 217056256
    assert msg["name"] == "EEC1"
    assert msg["pgn"] == 0xF004
    assert msg["sa"] == 0
    assert msg["priority"] == 3
    assert [s["name"] for s in msg["signals"]] == ["Speed", "Mode"]


def test_to_dict_keeps_absence_and_int_keys():
    data = parse_dbc(DBC).to_dict()
    speed, mode = data["messages"][0]["signals"]
    assert data["messages"][0]["comment"] is None
    assert speed["comment"] == "Engine speed"
    assert speed["value_descriptions"] is None
    assert mode["comment"] is None
    assert mode["value_descriptions"] == {0: "Off", 15: "N/A"}


def test_to_json_nulls_and_string_keys():
    data = json.loads(parse_dbc(DBC).to_json())
    speed, mode = data["messages"][0]["signals"]
    assert speed["value_descriptions"] is None
    assert mode["comment"] is None
    assert mode["value_descriptions"] == {"0": "Off", "15": "N/A"}
    assert mode["byte_order"] == "LittleEndian"
    assert [m["name"] for m in data["messages"]] == ["EEC1", "Plain"]


def test_from_json_restores_model():
    """JSON output loads back with int keys and absent fields intact."""
    original = parse_dbc(DBC)
    restored = Network.from_json(original.to_json(indent=2))
    assert restored == original
    mode = restored.messages[0].get_signal("Mode")
    assert mode.value_descriptions == {0: "Off", 15: "N/A"}
    assert restored.messages[1].comment is None
    assert restored.messages[0].pgn == 0xF004


def test_empty_comment_distinct_from_absent():
    sig = make_signal(comment="", value_descriptions={})
    data = sig.model_dump()
    assert data["comment"] == ""
    assert data["value_descriptions"] == {}
    assert make_signal().model_dump()["comment"] is None


def test_from_json_rejects_invalid():
    with pytest.raises(ValidationError):
        Network.from_json('{"messages": [{"id": "not a number"}]}')
