"""Tests for MapperRegistry and MapperValidator."""

import logging
import threading
import pytest

from opentrust.errors import ValidationError
from opentrust.mapper import (
    BooleanMapper,
    CategoricalMapper,
    CategoricalParams,
    MapperRegistry,
    MapperType,
    MapperValidator,
    NumericalMapper,
    NumericalParams,
)


def _numerical(mapper_id="health-factor", version="1.0.0"):
    return NumericalMapper(NumericalParams(
        id=mapper_id, version=version,
        falsity_point=1.0, indeterminacy_point=1.5, truth_point=3.0,
    ))


def _categorical(mapper_id="kyc"):
    return CategoricalMapper(CategoricalParams(
        id=mapper_id, version="1.0.0",
        mappings={"OK": {"T": 1.0, "I": 0.0, "F": 0.0}},
        default_judgment={"T": 0.0, "I": 1.0, "F": 0.0},
    ))


@pytest.fixture
def registry():
    return MapperRegistry([_numerical(), _categorical(), BooleanMapper.security("ssl")])


# ═══════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════


class TestRegistration:

    def test_initial_mappers(self, registry):
        assert len(registry) == 3
        assert registry.list() == ["health-factor", "kyc", "ssl"]
        assert "kyc" in registry
        assert 42 not in registry

    def test_duplicate_rejected(self, registry):
        with pytest.raises(ValidationError, match="already registered"):
            registry.register(_numerical())

    def test_update(self, registry):
        replacement = _numerical(version="2.0.0")
        registry.update(replacement)
        assert registry.get("health-factor") is replacement

    def test_update_unknown(self, registry):
        with pytest.raises(ValidationError, match="not registered"):
            registry.update(_numerical("other"))

    def test_register_or_update(self, registry):
        registry.register_or_update(_numerical("other"))
        registry.register_or_update(_numerical("other", "1.1.0"))
        assert registry.get("other").parameters.version == "1.1.0"

    def test_unregister(self, registry):
        assert registry.unregister("kyc") is True
        assert registry.unregister("kyc") is False
        assert registry.get("kyc") is None
        assert registry.count() == 2

    def test_clear(self, registry):
        registry.clear()
        assert len(registry) == 0

    def test_registries_are_independent(self, registry):
        other = MapperRegistry()
        assert not other.has("kyc")
        other.register(_categorical())
        registry.unregister("kyc")
        assert other.has("kyc")

    def test_debug_logging(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="opentrust.mapper.registry"):
            MapperRegistry([_numerical()])
        assert "Registered mapper health-factor" in caplog.text

    def test_concurrent_registration(self):
        registry = MapperRegistry()
        threads = [
            threading.Thread(target=registry.register, args=(_numerical(f"m{n}"),))
            for n in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert registry.count() == 20


class TestLookup:

    def test_by_type(self, registry):
        assert [m.id for m in registry.by_type(MapperType.BOOLEAN)] == ["ssl"]
        assert [m.id for m in registry.by_type("numerical")] == ["health-factor"]

    def test_metadata(self, registry):
        meta = registry.metadata("health-factor")
        assert meta["type"] == "numerical"
        assert meta["version"] == "1.0.0"
        assert registry.metadata("missing") is None
        assert len(registry.list_metadata()) == 3

    def test_stats(self, registry):
        stats = registry.stats()
        assert stats["total"] == 3
        assert stats["by_type"] == {"numerical": 1, "categorical": 1, "boolean": 1}
        assert set(stats["types"]) == {"numerical", "categorical", "boolean"}


class TestExportImport:

    def test_round_trip(self, registry):
        exported = registry.export()
        assert exported[0]["type"] == "numerical"

        restored = MapperRegistry()
        ids = restored.import_configs(exported)
        assert ids == ["health-factor", "kyc", "ssl"]
        assert restored.get("health-factor").apply(2.25).T == pytest.approx(0.5)
        assert restored.get("kyc").apply("??").I == 1.0
        assert restored.export() == exported

    def test_import_conflict(self, registry):
        with pytest.raises(ValidationError, match="replace=True"):
            registry.import_configs(registry.export())

    def test_import_replace(self, registry):
        configs = registry.export()
        configs[0]["version"] = "9.9.9"
        registry.import_configs(configs, replace=True)
        assert registry.get("health-factor").parameters.version == "9.9.9"

    def test_import_is_all_or_nothing(self):
        registry = MapperRegistry()
        good = _numerical().parameters.to_dict()
        bad = {"id": "broken", "version": "1.0.0", "mappings": {"X": {"T": 2}}}
        with pytest.raises(ValidationError):
            registry.import_configs([good, bad])
        assert registry.count() == 0

    def test_snapshot(self, registry):
        snap = registry.snapshot()
        assert snap["count"] == 3
        assert snap["timestamp"].endswith("Z")
        assert len(snap["mappers"]) == 3


# ═══════════════════════════════════════════════════════════════════
# Validator
# ═══════════════════════════════════════════════════════════════════


class TestValidator:

    @pytest.fixture
    def validator(self):
        return MapperValidator()

    def test_numerical_config(self, validator):
        config = {
            "id": "latency", "version": "1.0.0",
            "falsity_point": 500, "indeterminacy_point": 200, "truth_point": 50,
        }
        assert validator.validate(config) is True
        mapper = validator.create_mapper(config)
        assert isinstance(mapper, NumericalMapper)

    def test_type_detection(self, validator):
        assert validator.detect_type({"mappings": {}}) is MapperType.CATEGORICAL
        assert validator.detect_type({"true_map": {}, "false_map": {}}) is MapperType.BOOLEAN
        assert validator.detect_type({"type": "numerical"}) is MapperType.NUMERICAL
        with pytest.raises(ValidationError, match="Cannot determine"):
            validator.detect_type({"id": "x"})
        with pytest.raises(ValidationError, match="Unknown mapper type"):
            validator.detect_type({"type": "fuzzy"})

    def test_bad_version(self, validator):
        config = {
            "id": "b", "version": "v1",
            "true_map": {"T": 1, "I": 0, "F": 0},
            "false_map": {"T": 0, "I": 0, "F": 1},
        }
        with pytest.raises(ValidationError, match="Schema validation failed"):
            validator.create_mapper(config)

    def test_unknown_property(self, validator):
        config = {
            "id": "n", "version": "1.0.0", "colour": "red",
            "falsity_point": 0, "indeterminacy_point": 1, "truth_point": 2,
        }
        with pytest.raises(ValidationError, match="colour"):
            validator.create_mapper(config)

    def test_degree_out_of_range(self, validator):
        config = {"id": "c", "version": "1.0.0", "mappings": {"X": {"T": 1.5, "I": 0, "F": 0}}}
        with pytest.raises(ValidationError, match="mappings.X.T"):
            validator.create_mapper(config)

    def test_semantic_errors_from_mapper(self, validator):
        config = {
            "id": "n", "version": "1.0.0",
            "falsity_point": 1, "indeterminacy_point": 1, "truth_point": 2,
        }
        with pytest.raises(ValidationError, match="distinct"):
            validator.create_mapper(config)

    def test_conservation_checked(self, validator):
        config = {"id": "c", "version": "1.0.0", "mappings": {"X": {"T": 0.9, "I": 0.9, "F": 0}}}
        with pytest.raises(ValidationError, match="Conservation"):
            validator.create_mapper(config)

    def test_not_an_object(self, validator):
        with pytest.raises(ValidationError, match="must be an object"):
            validator.validate(["id", "x"])

    def test_schema_for(self, validator):
        schema = validator.schema_for("boolean")
        assert "true_map" in schema["required"]
        with pytest.raises(ValidationError):
            validator.schema_for("fuzzy")
