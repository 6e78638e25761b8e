"""Tests for auxiliary HTML price sources."""

from __future__ import annotations

from datetime import datetime, timezone

from vehicle_db.collector.html_source import (
    HTML_SOURCE_CODE,
    HtmlTableSource,
    NullSource,
    parse_price_table,
    raw_to_records,
)
from vehicle_db.common.models import RawRecord, VehicleType

NOW = datetime(2026, 3, 7, tzinfo=timezone.utc)
PAGE = "https://boats.test/precos"

SAMPLE_HTML = """
<html><body>
<table class="nav"><tr><td>Home</td></tr></table>
<table class="prices">
  <tr><th>Marca</th><th>Modelo</th><th>Ano</th><th>Preço</th></tr>
  <tr><td>Focker</td><td>242 GTO</td><td>2021</td><td>R$ 389.900,00</td></tr>
  <tr><td>Schaefer</td><td>303</td><td>2019</td><td>sob consulta</td></tr>
  <tr><td></td><td>Sem marca</td><td>2020</td><td>R$ 10.000,00</td></tr>
  <tr><td>Real</td><td>40</td><td>----</td><td>R$ 1.000.000,00</td></tr>
</table>
</body></html>
"""


class TestParsePriceTable:
    def test_skips_header_and_short_tables(self):
        rows = parse_price_table(SAMPLE_HTML)
        assert len(rows) == 4
        assert rows[0] == RawRecord(brand="Focker", model="242 GTO", year="2021", price="R$ 389.900,00")

    def test_no_table(self):
        assert parse_price_table("<p>nothing here</p>") == []


class TestRawToRecords:
    def test_drops_incomplete_and_prices_missing(self):
        records = raw_to_records(parse_price_table(SAMPLE_HTML), VehicleType.BOAT, collected_at=NOW)

        assert [r.brand for r in records] == ["Focker", "Schaefer"]
        focker, schaefer = records
        assert focker.price == 389_900
        assert focker.source_code == HTML_SOURCE_CODE
        # No usable price on the page: algorithmic estimate fills in
        assert schaefer.price > 0
        assert schaefer.type == VehicleType.BOAT

    def test_empty_input(self):
        assert raw_to_records([], VehicleType.CAR) == []

    def test_dot_decimal_price_and_unsluggable_model(self):
        rows = [
            RawRecord(brand="Focker", model="160", year="2022", price="45123.50"),
            RawRecord(brand="Focker", model="???", year="2022", price="R$ 50.000,00"),
        ]
        [record] = raw_to_records(rows, VehicleType.BOAT, collected_at=NOW)
        assert record.price == 45_124
        assert record.id == "boat-focker-160-2022"


class TestSources:
    def test_null_source(self):
        assert NullSource().fetch_records(VehicleType.CAR) == []

    def test_html_table_source(self, make_client, fake_response):
        client, _ = make_client({PAGE: [fake_response(200, SAMPLE_HTML)]})
        source = HtmlTableSource(client, {"boat": PAGE})

        assert len(source.fetch_records(VehicleType.BOAT)) == 4
        assert source.fetch_records(VehicleType.CAR) == []

    def test_unavailable_page_yields_nothing(self, make_client, fake_response):
        client, _ = make_client({PAGE: [fake_response(500, "down")]})
        source = HtmlTableSource(client, {"boat": PAGE})

        assert source.fetch_records(VehicleType.BOAT) == []
