"""Tests for the subgraph query modules against a fake subgraph."""

from datetime import datetime, timezone

import pytest

from horizon_data.adapters.subgraph import SubgraphClient
from horizon_data.queries import binary_options, exchanges, hzn, liquidations, rate, zassets


class TestExchanges:
    """Tests for exchange queries."""

    @pytest.mark.asyncio
    async def test_since_normalizes_records(self, make_subgraph, make_exchange):
        fake = make_subgraph({"zassetExchanges": [make_exchange(1584266400, usd=150.5, fees=1.25, address="0xa")]})

        async with SubgraphClient(transport=fake.transport) as client:
            (record,) = await exchanges.since(client, min_timestamp=1584230400)

        assert record["hash"] == "0xhash1"
        assert record["timestamp"] == 1584266400000
        assert record["date"] == datetime(2020, 3, 15, 10, tzinfo=timezone.utc)
        assert record["gasPrice"] == 20.0
        assert record["fromAmountInUSD"] == 150.5
        assert record["feesInUSD"] == 1.25
        assert record["fromCurrencyKey"] == "zUSD"
        assert record["toCurrencyKey"] == "zBTC"
        assert record["fromCurrencyKeyBytes"].startswith("0x7a555344")

    @pytest.mark.asyncio
    async def test_since_filters(self, make_subgraph):
        fake = make_subgraph()

        async with SubgraphClient(transport=fake.transport) as client:
            await exchanges.since(client, min_timestamp=100, from_address="0xABC")

        (query,) = fake.queries_for("zassetExchanges")
        assert 'where: {timestamp_gte: 100, from: "0xabc"}' in query
        assert "orderBy: timestamp, orderDirection: desc" in query

    @pytest.mark.asyncio
    async def test_aggregate_unknown_series(self, make_subgraph):
        async with SubgraphClient(transport=make_subgraph().transport) as client:
            with pytest.raises(ValueError, match="Unknown time series"):
                await exchanges.aggregate(client, time_series="1h")

    @pytest.mark.asyncio
    async def test_total_missing(self, make_subgraph):
        async with SubgraphClient(transport=make_subgraph().transport) as client:
            assert await exchanges.total(client) is None


class TestHolders:
    """Tests for holder queries."""

    @pytest.mark.asyncio
    async def test_zasset_holders_addresses_only_keeps_order(self, make_subgraph):
        fake = make_subgraph({
            "zassetHolders": [
                {"id": "0xc-zUSD"},
                {"id": "0xa-zUSD"},
                {"id": "0xb-zBTC"},
            ]
        })

        async with SubgraphClient(transport=fake.transport) as client:
            results = await zassets.holders(client, addresses_only=True)

        assert results == [{"address": "0xc"}, {"address": "0xa"}, {"address": "0xb"}]
        assert "{ id }" in fake.requests[0]["query"]

    @pytest.mark.asyncio
    async def test_zasset_transfers_exclude_hzn_by_default(self, make_subgraph):
        fake = make_subgraph()

        async with SubgraphClient(transport=fake.transport) as client:
            await zassets.transfers(client)
            await zassets.transfers(client, zasset="zUSD")

        first, second = fake.queries_for("transfers")
        assert 'source_not: "HZN"' in first
        assert 'source: "zUSD"' in second
        assert "source_not" not in second

    @pytest.mark.asyncio
    async def test_hzn_holders_collateral_in_wei(self, make_subgraph):
        fake = make_subgraph()

        async with SubgraphClient(transport=fake.transport) as client:
            await hzn.holders(client, min_collateral=1.5, max_collateral=10)

        query = fake.requests[0]["query"]
        assert 'collateral_gte: "1500000000000000000"' in query
        assert 'collateral_lte: "10000000000000000000"' in query


class TestRates:
    """Tests for rate queries."""

    @pytest.mark.asyncio
    async def test_daily_rate_change(self, make_subgraph):
        fake = make_subgraph({
            "rateUpdates": [
                {"id": "1", "zasset": "zBTC", "rate": "5000000000000000000000", "block": "10", "timestamp": "1584266400"},
            ]
        })

        async with SubgraphClient(transport=fake.transport) as client:
            (change,) = await rate.daily_rate_change(client, zassets=["zBTC"], from_block=10)

        assert change["zasset"] == "zBTC"
        assert change["rate"] == 5000.0
        assert change["rate24hAgo"] == 5000.0
        assert change["change"] == 0.0
        assert "timestamp_lte: 1584180000" in fake.requests[-1]["query"]


class TestLiquidations:
    """Tests for liquidation queries."""

    @pytest.mark.asyncio
    async def test_active_excludes_removed_and_liquidated(self, make_subgraph):
        fake = make_subgraph({
            "accountFlaggedForLiquidations": [
                {"id": f"{a}-flag", "account": a, "deadline": "1584266400"}
                for a in ("0xa", "0xb", "0xc", "0xd")
            ],
            "accountRemovedFromLiquidations": [{"id": "0x1-0", "account": "0xb", "time": "1584266400"}],
            "accountLiquidateds": [{"id": "0x2-0", "account": "0xc", "time": "1584266400"}],
        })

        async with SubgraphClient(transport=fake.transport) as client:
            active = await liquidations.get_active_liquidations(client, min_time=1, max_time=2)

        assert [row["account"] for row in active] == ["0xa", "0xd"]
        (flag_query,) = fake.queries_for("accountFlaggedForLiquidations")
        assert "deadline_gte: 1" in flag_query
        assert "deadline_lte" not in flag_query

    @pytest.mark.asyncio
    async def test_active_truncates_to_max(self, make_subgraph):
        fake = make_subgraph({
            "accountFlaggedForLiquidations": [
                {"id": f"{a}-flag", "account": a, "deadline": "1584266400"} for a in ("0xa", "0xb")
            ],
        })

        async with SubgraphClient(transport=fake.transport) as client:
            active = await liquidations.get_active_liquidations(client, max_results=1)

        assert [row["account"] for row in active] == ["0xa"]


class TestBinaryOptions:
    """Tests for binary option queries."""

    @pytest.mark.asyncio
    async def test_markets_bid_on_distinct(self, make_subgraph):
        fake = make_subgraph({
            "optionTransactions": [
                {"id": f"0x{i}-0", "timestamp": "1584266400", "type": "bid", "market": market, "side": "0"}
                for i, market in enumerate(["0xm2", "0xm1", "0xm2", "0xm3"])
            ]
        })

        async with SubgraphClient(transport=fake.transport) as client:
            markets = await binary_options.markets_bid_on(client, account="0xA")

        assert markets == ["0xm2", "0xm1", "0xm3"]
        assert 'type: "bid"' in fake.requests[0]["query"]
        assert 'account: "0xa"' in fake.requests[0]["query"]
