"""Shared fixtures for flow parser tests.

`SAMPLE_FLOW` is a small but realistic flow document: an MQ input feeding a
compute node, a route with two filter-table entries, an MQ output, an error
handling subflow, and two sticky notes. `make_flow` wraps node/connection/note
snippets in the same document envelope for focused tests.
"""

from pathlib import Path
from typing import Callable

import pytest

from msgflow.parsing.accessor import AttributeAccessor

ENVELOPE = """<?xml version="1.0" encoding="UTF-8"?>
<ecore:EPackage xmi:version="2.0"
    xmlns:xmi="http://www.omg.org/XMI"
    xmlns:ecore="http://www.eclipse.org/emf/2002/Ecore"
    xmlns:eflow="http://www.ibm.com/wbi/2005/eflow"
    xmlns:utility="http://www.ibm.com/wbi/2005/eflow_utility"
    nsURI="orders/Orders.msgflow" nsPrefix="orders_Orders.msgflow">
  <eClassifiers xmi:type="eflow:FCMComposite" name="FCMComposite_1">
    <translation xmi:type="utility:TranslatableString" key="Orders" bundleName="orders/Orders" pluginId="orders"/>
    {description}
    <composition>
      {body}
    </composition>
  </eClassifiers>
</ecore:EPackage>
"""

SAMPLE_DESCRIPTION = """
    <shortDescription xmi:type="utility:ConstantString" string="Order intake"/>
    <longDescription xmi:type="utility:ConstantString" string="Reads orders from MQ and routes them"/>
"""

SAMPLE_BODY = """
      <nodes xmi:type="ComIbmMQInput.msgnode:FCMComposite_1" xmi:id="FCMComposite_1_1" location="40,80"
          queueName="ORDERS.IN" transactionMode="no" componentLevel="flow" additionalInstances="2"
          messageDomainProperty="XMLNSC" parserXmlnscBuildTreeUsingXMLSchema="true"
          parserXmlnscMixedContentRetainMode="all" validateMaster="contentAndValue">
        <translation xmi:type="utility:ConstantString" string="Orders In"/>
        <monitorEvents eventSourceName="Orders In.transaction.Start" eventEnabled="true"/>
      </nodes>
      <nodes xmi:type="ComIbmCompute.msgnode:FCMComposite_1" xmi:id="FCMComposite_1_2" location="200,80"
          computeExpression="esql://routine/orders#Orders_Compute.Main" dataSource="ORDERSDB">
        <translation xmi:type="utility:ConstantString" string="Transform"/>
        <monitorEvents eventSourceName="Transform.terminal.in" eventEnabled="false"/>
      </nodes>
      <nodes xmi:type="ComIbmRoute.msgnode:FCMComposite_1" xmi:id="FCMComposite_1_3" location="360,80">
        <translation xmi:type="utility:ConstantString" string="Route"/>
        <filterTable xmi:type="ComIbmRoute.msgnode:FilterTableType" filterPattern="$Root/XMLNSC/Order/Express" routingOutputTerminal="Express"/>
        <filterTable xmi:type="ComIbmRoute.msgnode:FilterTableType" filterPattern="true()" routingOutputTerminal="Standard"/>
      </nodes>
      <nodes xmi:type="ComIbmMQOutput.msgnode:FCMComposite_1" xmi:id="FCMComposite_1_4" location="520,80"
          queueName="ORDERS.OUT" transactionMode="automatic">
        <translation xmi:type="utility:ConstantString" string="Orders Out"/>
      </nodes>
      <nodes xmi:type="CommonErrorHandler.subflow:FCMComposite_1" xmi:id="FCMComposite_1_5" location="200,200">
        <translation xmi:type="utility:ConstantString" string="Error Handler"/>
      </nodes>
      <connections xmi:type="eflow:FCMConnection" xmi:id="FCMConnection_1" targetNode="FCMComposite_1_2" sourceNode="FCMComposite_1_1" sourceTerminalName="OutTerminal.out" targetTerminalName="InTerminal.in"/>
      <connections xmi:type="eflow:FCMConnection" xmi:id="FCMConnection_2" targetNode="FCMComposite_1_5" sourceNode="FCMComposite_1_1" sourceTerminalName="OutTerminal.catch" targetTerminalName="InTerminal.Input"/>
      <connections xmi:type="eflow:FCMConnection" xmi:id="FCMConnection_3" targetNode="FCMComposite_1_3" sourceNode="FCMComposite_1_2" sourceTerminalName="OutTerminal.out" targetTerminalName="InTerminal.in"/>
      <connections xmi:type="eflow:FCMConnection" xmi:id="FCMConnection_4" targetNode="FCMComposite_1_4" sourceNode="FCMComposite_1_3" sourceTerminalName="OutTerminal.Express" targetTerminalName="InTerminal.in"/>
      <connections xmi:type="eflow:FCMConnection" xmi:id="FCMConnection_5" targetNode="FCMComposite_1_4" sourceNode="FCMComposite_1_3" sourceTerminalName="OutTerminal.Standard" targetTerminalName="InTerminal.in"/>
      <connections xmi:type="eflow:FCMConnection" xmi:id="FCMConnection_6" targetNode="FCMComposite_1_99" sourceNode="FCMComposite_1_4" sourceTerminalName="OutTerminal.out" targetTerminalName="InTerminal.in"/>
      <stickyNote location="120,45" association="FCMComposite_1_1 FCMComposite_1_2">
        <body xmi:type="utility:ConstantString" string="Intake path"/>
      </stickyNote>
      <stickyNote location="300,10">
        <body xmi:type="utility:ConstantString" string="Unattached"/>
      </stickyNote>
"""


def make_document(body: str = "", description: str = "") -> str:
    return ENVELOPE.format(body=body, description=description)


SAMPLE_FLOW = make_document(SAMPLE_BODY, SAMPLE_DESCRIPTION)


@pytest.fixture
def sample_xml() -> str:
    return SAMPLE_FLOW


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Sample flow written to disk."""
    path = tmp_path / "Orders.msgflow"
    path.write_text(SAMPLE_FLOW, encoding="utf-8")
    return path


@pytest.fixture
def make_flow() -> Callable[..., str]:
    """Factory fixture wrapping snippets in a flow document envelope."""
    return make_document


@pytest.fixture
def make_accessor() -> Callable[[str], AttributeAccessor]:
    def _create(body: str, description: str = "") -> AttributeAccessor:
        return AttributeAccessor.from_string(make_document(body, description))

    return _create
