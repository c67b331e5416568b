"""Pytest fixtures for test suite."""

from __future__ import annotations

import io
import zipfile
from typing import Callable

import pytest

from dmncheck.tables import ColumnSpec, DecisionTable, TableRule
from dmncheck.verification import DmnVerifier


# =============================================================================
# DMN Documents
# =============================================================================

UNIQUE_OVERLAP_DMN = b"""<?xml version="1.0" encoding="UTF-8"?>
<definitions xmlns="https://www.omg.org/spec/DMN/20191111/MODEL/"
             id="defs_loan" name="Loan Decisions" namespace="http://example.com/loan">
  <description>Loan approval decisions</description>
  <decision id="decision_risk" name="Risk Category">
    <description>Classifies applicant risk</description>
    <decisionTable id="table_risk" hitPolicy="UNIQUE">
      <input id="in_segment" label="Segment">
        <inputExpression id="expr_segment" typeRef="string"><text>segment</text></inputExpression>
      </input>
      <output id="out_risk" name="risk" typeRef="string"/>
      <rule id="rule_a">
        <inputEntry id="ie_a"><text>"A"</text></inputEntry>
        <outputEntry id="oe_a"><text>"X"</text></outputEntry>
      </rule>
      <rule id="rule_b">
        <inputEntry id="ie_b"><text>"A"</text></inputEntry>
        <outputEntry id="oe_b"><text>"Y"</text></outputEntry>
      </rule>
    </decisionTable>
  </decision>
</definitions>
"""

CLEAN_DMN = b"""<?xml version="1.0" encoding="UTF-8"?>
<definitions id="defs_fee" name="Fees" namespace="http://example.com/fees">
  <description>Fee schedule</description>
  <inputData id="input_amount" name="Amount">
    <description>Order amount</description>
  </inputData>
  <decision id="decision_fee" name="Handling Fee">
    <description>Computes the handling fee</description>
    <decisionTable id="table_fee">
      <input id="in_amount" label="Amount">
        <inputExpression id="expr_amount"><text>amount</text></inputExpression>
      </input>
      <input id="in_member" label="Member">
        <inputExpression id="expr_member" typeRef="boolean"><text>member</text></inputExpression>
      </input>
      <output id="out_fee" name="fee" typeRef="number"/>
      <rule id="r1">
        <inputEntry><text>[0..100]</text></inputEntry>
        <inputEntry><text>true</text></inputEntry>
        <outputEntry><text>0</text></outputEntry>
      </rule>
      <rule id="r2">
        <inputEntry><text>[0..100]</text></inputEntry>
        <inputEntry><text>false</text></inputEntry>
        <outputEntry><text>5</text></outputEntry>
      </rule>
      <rule id="r3">
        <inputEntry><text>[100..1000]</text></inputEntry>
        <inputEntry><text>-</text></inputEntry>
        <outputEntry><text>2.5</text></outputEntry>
      </rule>
    </decisionTable>
  </decision>
</definitions>
"""

MESSY_DMN = b"""<?xml version="1.0" encoding="UTF-8"?>
<dmn:definitions xmlns:dmn="https://www.omg.org/spec/DMN/20191111/MODEL/"
                 id="defs_messy" name="Messy">
  <dmn:inputData id="input_age" name="Age"/>
  <dmn:businessKnowledgeModel id="bkm_rate" name="Rate">
    <dmn:description>   </dmn:description>
  </dmn:businessKnowledgeModel>
  <dmn:decision id="decision_band" name="Band">
    <dmn:decisionTable hitPolicy="first">
      <dmn:input id="in_age">
        <dmn:inputExpression typeRef="number"><dmn:text>age</dmn:text></dmn:inputExpression>
      </dmn:input>
      <dmn:output id="out_band" name="band" typeRef="string"/>
      <dmn:rule>
        <dmn:inputEntry><dmn:text>[1..5]</dmn:text></dmn:inputEntry>
        <dmn:outputEntry><dmn:text>"young"</dmn:text></dmn:outputEntry>
      </dmn:rule>
      <dmn:rule id="rule_old">
        <dmn:inputEntry><dmn:text>[10..15]</dmn:text></dmn:inputEntry>
        <dmn:outputEntry><dmn:text>"older"</dmn:text></dmn:outputEntry>
      </dmn:rule>
      <dmn:rule id="rule_any">
        <dmn:inputEntry><dmn:text>-</dmn:text></dmn:inputEntry>
        <dmn:outputEntry><dmn:text>42</dmn:text></dmn:outputEntry>
      </dmn:rule>
    </dmn:decisionTable>
  </dmn:decision>
</dmn:definitions>
"""

MALFORMED_DMN = b"""<?xml version="1.0" encoding="UTF-8"?>
<definitions id="defs_broken">
  <decision id="d1">
</definitions>
"""


@pytest.fixture
def unique_overlap_dmn() -> bytes:
    """UNIQUE table whose two rules match the same input with different outputs."""
    return UNIQUE_OVERLAP_DMN


@pytest.fixture
def clean_dmn() -> bytes:
    """Document without any semantic defect."""
    return CLEAN_DMN


@pytest.fixture
def messy_dmn() -> bytes:
    """Prefixed-namespace document with gaps, type and description issues."""
    return MESSY_DMN


@pytest.fixture
def malformed_dmn() -> bytes:
    """Document that is not well-formed XML."""
    return MALFORMED_DMN


# =============================================================================
# Table Builders
# =============================================================================


def build_table(
    rules: list[tuple[list[str], list[str]]],
    hit_policy: str | None = None,
    input_types: list[str | None] | None = None,
    output_types: list[str | None] | None = None,
    table_id: str = "table_1",
    rule_ids: list[str | None] | None = None,
) -> DecisionTable:
    """Build a decision table from ``(inputs, outputs)`` rows."""
    input_count = len(rules[0][0]) if rules else 0
    output_count = len(rules[0][1]) if rules else 0
    input_types = input_types if input_types is not None else [None] * input_count
    output_types = output_types if output_types is not None else [None] * output_count
    rule_ids = rule_ids if rule_ids is not None else [f"rule_{i + 1}" for i in range(len(rules))]

    return DecisionTable(
        id=table_id,
        hit_policy=hit_policy,
        input_columns=tuple(ColumnSpec(type_ref=t) for t in input_types),
        output_columns=tuple(ColumnSpec(type_ref=t) for t in output_types),
        rules=tuple(
            TableRule(id=rule_id, input_entries=tuple(inputs), output_entries=tuple(outputs))
            for rule_id, (inputs, outputs) in zip(rule_ids, rules)
        ),
    )


@pytest.fixture
def make_table() -> Callable[..., DecisionTable]:
    """Factory for decision tables built from plain rows."""
    return build_table


@pytest.fixture
def verifier() -> DmnVerifier:
    """Verifier with explicit limits, independent of the environment."""
    return DmnVerifier(
        max_rules_for_overlap=500,
        description_kinds=["decision", "inputData", "businessKnowledgeModel"],
        check_definitions=True,
        min_decision_name_length=5,
    )


# =============================================================================
# Archives
# =============================================================================


def build_zip(entries: list[tuple[str, bytes]]) -> bytes:
    """Build an in-memory ZIP archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries:
            archive.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def make_zip() -> Callable[[list[tuple[str, bytes]]], bytes]:
    """Factory for in-memory ZIP archives."""
    return build_zip
