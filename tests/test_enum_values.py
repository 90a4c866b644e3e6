"""Tests for EnumValueGenerator."""

import pytest

from relseed.cache import EnumValueCache
from relseed.generators import EnumValueGenerator
from relseed.models import EnumValue, PropertySchema
from relseed.seed_config import EnumPropertyConfig, EnumValueStrategy, PropertyConfig


@pytest.fixture
def status() -> PropertySchema:
    return PropertySchema(
        "Status", "OrderStatus", is_enum=True, enum_values=["Pending", "Shipped", "Done"]
    )


@pytest.fixture
def permissions() -> PropertySchema:
    return PropertySchema(
        "Access",
        "Permissions",
        is_enum=True,
        is_enum_flags=True,
        enum_values=["Read", "Write", "Delete"],
    )


@pytest.fixture
def enums(provider) -> EnumValueGenerator:
    return EnumValueGenerator(provider, EnumValueCache())


class TestUseAll:
    """Tests for the UseAll strategy."""

    def test_cycles_members_in_order(self, enums, status) -> None:
        """Test five records cycle through three members."""
        config = EnumPropertyConfig("Status", strategy=EnumValueStrategy.USE_ALL)

        values = [enums.generate(status, i, config) for i in range(5)]

        assert values == [
            "OrderStatus.Pending",
            "OrderStatus.Shipped",
            "OrderStatus.Done",
            "OrderStatus.Pending",
            "OrderStatus.Shipped",
        ]

    def test_no_enum_config_means_use_all(self, enums, status) -> None:
        """Test plain or missing configs behave like UseAll."""
        plain = PropertyConfig("Status")

        assert [enums.generate(status, i) for i in range(4)] == [
            enums.generate(status, i, plain) for i in range(4)
        ]
        assert enums.generate(status, 3) == "OrderStatus.Pending"

    def test_nullable_type_name_is_unwrapped(self, enums) -> None:
        """Test nullable enum types are qualified with the bare type name."""
        prop = PropertySchema("Status", "OrderStatus?", is_enum=True, enum_values=["Pending"])

        assert enums.generate(prop, 0) == "OrderStatus.Pending"


class TestUseSpecific:
    """Tests for the UseSpecific strategy."""

    def test_cycles_subset(self, enums, status) -> None:
        """Test records cycle through the selected subset."""
        config = EnumPropertyConfig(
            "Status",
            strategy=EnumValueStrategy.USE_SPECIFIC,
            selected_values=["Shipped", "Done"],
        )

        values = [enums.select(status, i, config).members[0] for i in range(3)]

        assert values == ["Shipped", "Done", "Shipped"]

    def test_empty_subset_uses_first_member(self, enums, status) -> None:
        """Test an empty subset falls back to the first member."""
        config = EnumPropertyConfig("Status", strategy=EnumValueStrategy.USE_SPECIFIC)

        assert {enums.generate(status, i, config) for i in range(5)} == {"OrderStatus.Pending"}


class TestRandom:
    """Tests for the Random strategy."""

    def test_values_are_members(self, enums, status) -> None:
        """Test random picks are always declared members."""
        config = EnumPropertyConfig("Status", strategy=EnumValueStrategy.RANDOM)

        for i in range(50):
            value = enums.select(status, i, config)
            assert len(value.members) == 1
            assert value.members[0] in status.enum_values

    def test_repeated_calls_are_cached(self, enums, status) -> None:
        """Test the same record gets the same random pick."""
        config = EnumPropertyConfig("Status", strategy=EnumValueStrategy.RANDOM)

        first = [enums.generate(status, i, config) for i in range(20)]
        again = [enums.generate(status, i, config) for i in range(20)]

        assert first == again

    def test_flags_combine_distinct_members(self, enums, permissions) -> None:
        """Test flag enums combine value_count distinct members."""
        config = EnumPropertyConfig(
            "Access",
            strategy=EnumValueStrategy.RANDOM,
            combine_flags=True,
            value_count=2,
        )

        for i in range(20):
            value = enums.select(permissions, i, config)
            assert len(value.members) == 2
            assert len(set(value.members)) == 2
            assert " | " in enums.generate(permissions, i, config)

    def test_value_count_capped_at_member_count(self, enums, permissions) -> None:
        """Test asking for more flags than exist uses every member once."""
        config = EnumPropertyConfig(
            "Access",
            strategy=EnumValueStrategy.RANDOM,
            combine_flags=True,
            value_count=10,
        )

        value = enums.select(permissions, 0, config)

        assert sorted(value.members) == ["Delete", "Read", "Write"]

    def test_flags_without_combine_pick_one(self, enums, permissions) -> None:
        """Test flag enums pick a single member unless combining is on."""
        config = EnumPropertyConfig("Access", strategy=EnumValueStrategy.RANDOM, value_count=2)

        assert len(enums.select(permissions, 0, config).members) == 1


class TestCustom:
    """Tests for the Custom strategy."""

    def test_mapping(self, enums, permissions) -> None:
        """Test mapped records use their value(s) and others the first member."""
        config = EnumPropertyConfig(
            "Access",
            strategy=EnumValueStrategy.CUSTOM,
            custom_mapping={0: "Delete", 1: ["Read", "Write"]},
        )

        assert enums.generate(permissions, 0, config) == "Permissions.Delete"
        assert enums.generate(permissions, 1, config) == "Permissions.Read | Permissions.Write"
        assert enums.generate(permissions, 2, config) == "Permissions.Read"


class TestNonEnum:
    """Tests for properties that cannot produce enum values."""

    def test_non_enum_property(self, enums) -> None:
        """Test non-enum properties produce an empty literal."""
        assert enums.generate(PropertySchema("Name", "string"), 0) == ""
        assert enums.select(PropertySchema("Name", "string"), 0) is None

    def test_enum_without_members(self, enums) -> None:
        """Test enums without members produce an empty literal."""
        assert enums.generate(PropertySchema("Kind", "Kind", is_enum=True), 0) == ""

    def test_select_returns_enum_value(self, enums, status) -> None:
        """Test select returns a typed EnumValue."""
        assert enums.select(status, 1) == EnumValue("OrderStatus", ("Shipped",))
