"""Tests for the graph model builder -- snapshots in, nodes and edges out."""
from __future__ import annotations

import pytest

from schema_graph.builder import build_graph, edge_id
from schema_graph.sizing import node_size
from schema_graph.types import LayoutOptions

from conftest import table


class TestNodes:
    def test_emits_one_node_per_table_in_table_order(self, shop_schema):
        result = build_graph(shop_schema)
        assert [n.id for n in result.nodes] == ["users", "orders", "products", "order_items"]

    def test_node_keeps_column_order(self):
        result = build_graph([table("t", "id", "b", "a")])
        assert [c.name for c in result.nodes[0].columns] == ["id", "b", "a"]

    def test_node_size_comes_from_the_shared_sizing_function(self):
        result = build_graph([table("t", "id", "a", "b")])
        node = result.nodes[0]
        assert (node.width, node.height) == node_size(3)
        assert node.height == 40 + 3 * 28
        assert node.width == 220

    def test_node_size_honours_options(self):
        result = build_graph([table("t", "id")], LayoutOptions(row_height=10, base_height=5))
        assert result.nodes[0].height == 15

    def test_table_without_columns_gets_base_height(self):
        result = build_graph([table("empty")])
        assert result.nodes[0].height == 40

    def test_duplicate_table_names_keep_the_first_occurrence(self):
        result = build_graph([
            table("t", "id"),
            table("t", "id", "a", "b", fks=(("a", "t", "id"),)),
        ])
        assert len(result.nodes) == 1
        assert len(result.nodes[0].columns) == 1
        assert result.edges == []


class TestEdges:
    def test_emits_one_edge_per_foreign_key(self, shop_schema):
        result = build_graph(shop_schema)
        assert [e.id for e in result.edges] == [
            "e-orders-user_id-users",
            "e-order_items-order_id-orders",
            "e-order_items-product_id-products",
        ]

    def test_edge_ports_point_at_columns(self, shop_schema):
        edge = build_graph(shop_schema).edges[0]
        assert edge.source == "orders"
        assert edge.source_port == "user_id-source"
        assert edge.target == "users"
        assert edge.target_port == "id-target"

    def test_edge_label_is_the_constraint_name(self, shop_schema):
        edge = build_graph(shop_schema).edges[0]
        assert edge.label == "fk_orders_user_id"

    def test_edge_id_is_derived_from_source_column_and_target(self):
        assert edge_id("a", "b_id", "b") == "e-a-b_id-b"

    def test_parallel_edges_between_the_same_tables_stay_distinct(self):
        result = build_graph([
            table("people", "id"),
            table(
                "messages", "id", "sender_id", "recipient_id",
                fks=(("sender_id", "people", "id"), ("recipient_id", "people", "id")),
            ),
        ])
        assert len(result.edges) == 2
        assert result.edges[0].id != result.edges[1].id

    def test_repeated_reference_triples_get_suffixed_ids(self):
        result = build_graph([
            table("a", "id"),
            table("b", "id", "a_id", fks=(("a_id", "a", "id"), ("a_id", "a", "id"))),
        ])
        assert [e.id for e in result.edges] == ["e-b-a_id-a", "e-b-a_id-a#2"]

    def test_suffixed_id_never_collides_with_a_table_named_like_it(self):
        result = build_graph([
            table("r", "id"),
            table("r#2", "id"),
            table("t", "id", "c", fks=(("c", "r", "id"), ("c", "r", "id"), ("c", "r#2", "id"))),
        ])
        ids = [e.id for e in result.edges]
        assert len(ids) == 3
        assert len(set(ids)) == 3
        assert ids == ["e-t-c-r", "e-t-c-r#2", "e-t-c-r#2#2"]

    def test_self_reference_is_kept(self):
        result = build_graph([table("employees", "id", "manager_id", fks=(("manager_id", "employees", "id"),))])
        assert len(result.edges) == 1
        assert result.edges[0].is_self_reference

    def test_cycles_pass_through_unchanged(self):
        result = build_graph([
            table("a", "id", "b_id", fks=(("b_id", "b", "id"),)),
            table("b", "id", "a_id", fks=(("a_id", "a", "id"),)),
        ])
        assert [(e.source, e.target) for e in result.edges] == [("a", "b"), ("b", "a")]


class TestDanglingReferences:
    def test_reference_to_unknown_table_is_dropped(self):
        result = build_graph([table("orders", "id", "user_id", fks=(("user_id", "users", "id"),))])
        assert result.edges == []
        assert len(result.dropped) == 1
        assert result.dropped[0].table == "orders"
        assert result.dropped[0].foreign_key.referenced_table == "users"

    def test_no_edge_points_at_a_missing_node(self, shop_schema):
        snaps = shop_schema + [table("audit", "id", "actor_id", fks=(("actor_id", "ghosts", "id"),))]
        result = build_graph(snaps)
        node_ids = {n.id for n in result.nodes}
        assert all(e.target in node_ids and e.source in node_ids for e in result.edges)


class TestDeterminism:
    def test_repeated_builds_are_identical(self, shop_schema):
        first = build_graph(shop_schema)
        second = build_graph(shop_schema)
        assert first.nodes == second.nodes
        assert first.edges == second.edges

    def test_empty_input_produces_an_empty_graph(self):
        result = build_graph([])
        assert result.nodes == []
        assert result.edges == []
