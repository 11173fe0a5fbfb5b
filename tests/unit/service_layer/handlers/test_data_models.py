"""Unit tests for the data model and layer handlers."""

import pytest

from datamodeler.domain.errors import NotFoundError, ValidationError
from datamodeler.domain.model_graph import LayerKind, Relationship, RelationshipType
from datamodeler.service_layer import commands
from datamodeler.service_layer.queries import list_data_models, load_layer_graph
from tests.unit.service_layer.handlers.base import HandlerTestBase

# pylint: disable=magic-value-comparison


class TestCreateDataModel(HandlerTestBase):
    """Tests for create_data_model."""

    def test_creates_one_layer_per_kind(self):
        """By default every layer kind is created, in order, named after the model."""
        model_id = self.bus.handle(commands.CreateDataModel(name="Sales"))
        self.assert_committed()

        [(model, layers)] = list_data_models(self.bus.uow)
        assert model.id == model_id
        assert [layer.layer for layer in layers] == list(LayerKind)
        assert [layer.name for layer in layers] == [
            "Sales (flow)",
            "Sales (conceptual)",
            "Sales (logical)",
            "Sales (physical)",
        ]
        assert {layer.data_model_id for layer in layers} == {model_id}

    def test_requested_layers_are_deduplicated(self):
        """Only the requested kinds are created, each once."""
        self.bus.handle(
            commands.CreateDataModel(
                name="Ops",
                layers=(LayerKind.PHYSICAL, LayerKind.LOGICAL, LayerKind.PHYSICAL),
            )
        )
        [(_, layers)] = list_data_models(self.bus.uow)
        assert [layer.layer for layer in layers] == [
            LayerKind.PHYSICAL,
            LayerKind.LOGICAL,
        ]

    def test_layers_inherit_target_system(self):
        """The model's target system is copied onto its layers."""
        self.bus.handle(commands.CreateDataModel(name="Sales", target_system_id=3))
        [(model, layers)] = list_data_models(self.bus.uow)
        assert model.target_system_id == 3
        assert all(layer.target_system_id == 3 for layer in layers)

    def test_unknown_layer_kind_raises(self):
        """A layer kind outside the enum is refused before anything is written."""
        with pytest.raises(ValidationError, match="layer kind"):
            self.bus.handle(commands.CreateDataModel(name="Bad", layers=("staging",)))
        assert not self.data.data_models
        self.assert_not_committed()

    def test_blank_name_refused(self):
        """A data model needs a name."""
        with pytest.raises(ValidationError):
            self.bus.handle(commands.CreateDataModel(name=" "))
        assert not self.data.layers


class TestDeleteDataModel(HandlerTestBase):
    """Tests for delete_data_model."""

    seed_uses = ("seed_model", "seed_objects")

    def _seed_bus(self, request) -> None:
        self.sales = self.fx.seed_model(self.bus, "Sales")
        self.hr = self.fx.seed_model(self.bus, "HR")
        customer, order = self.fx.seed_objects(
            self.bus, self.sales.logical, "Customer", "Order"
        )
        self.bus.handle(
            commands.CreateRelationship(
                layer_id=self.sales.logical,
                source_object_id=customer,
                target_object_id=order,
                type="1:N",
            )
        )
        self.fx.seed_objects(self.bus, self.hr.logical, "Employee")

    def test_removes_model_and_everything_in_it(self):
        """Layers, objects and relationships of the model are gone."""
        self.bus.handle(commands.DeleteDataModel(self.sales.data_model_id))
        self.assert_committed()

        assert set(self.data.data_models) == {self.hr.data_model_id}
        assert {layer.data_model_id for layer in self.data.layers.values()} == {
            self.hr.data_model_id
        }
        assert [obj.name for obj in self.data.objects.values()] == ["Employee"]
        assert not self.data.relationships

    def test_unknown_model_raises(self):
        """Deleting a missing model is a NotFoundError."""
        with pytest.raises(NotFoundError, match=r"data model \(99\) not found"):
            self.bus.handle(commands.DeleteDataModel(99))
        self.assert_not_committed()
        assert len(self.data.data_models) == 2


class TestDeleteLayer(HandlerTestBase):
    """Tests for delete_layer."""

    seed_uses = ("seed_model", "seed_objects")

    def _seed_bus(self, request) -> None:
        self.model = self.fx.seed_model(self.bus, "Sales")
        self.logical_ids = self.fx.seed_objects(
            self.bus, self.model.logical, "Customer", "Order"
        )
        self.physical_ids = self.fx.seed_objects(
            self.bus, self.model.physical, "customers", "orders"
        )
        self.bus.handle(
            commands.CreateRelationship(
                layer_id=self.model.physical,
                source_object_id=self.physical_ids[0],
                target_object_id=self.physical_ids[1],
                type="1:N",
            )
        )

    def test_purges_layer_contents(self):
        """Objects and relationships of the layer are deleted with it."""
        self.bus.handle(commands.DeleteLayer(self.model.physical))
        self.assert_committed()

        assert self.model.physical not in self.data.layers
        assert sorted(self.data.objects) == self.logical_ids
        assert not self.data.relationships
        with pytest.raises(NotFoundError):
            load_layer_graph(self.model.physical, self.bus.uow)

    def test_other_layers_untouched(self):
        """Deleting one layer keeps the model and its other layers."""
        self.bus.handle(commands.DeleteLayer(self.model.physical))
        remaining = {layer.layer for layer in self.data.layers.values()}
        assert remaining == set(LayerKind) - {LayerKind.PHYSICAL}
        assert self.model.data_model_id in self.data.data_models

    def test_removes_relationships_pointing_into_layer(self):
        """A stray relationship from another layer into the purged one goes too."""
        stray = Relationship(
            id=50,
            model_id=self.model.logical,
            source_model_object_id=self.logical_ids[0],
            target_model_object_id=self.physical_ids[0],
            type=RelationshipType.ONE_TO_ONE,
        )
        self.data.relationships[stray.id] = stray

        self.bus.handle(commands.DeleteLayer(self.model.physical))
        assert stray.id not in self.data.relationships

    def test_unknown_layer_raises(self):
        """A missing layer is a NotFoundError and nothing changes."""
        with pytest.raises(NotFoundError, match=r"layer \(404\) not found"):
            self.bus.handle(commands.DeleteLayer(404))
        self.assert_not_committed()
        assert len(self.data.layers) == 4
