"""Tests for keeper selection."""

import pytest

from ..keeper import KeeperSelection, KeeperSelector
from ..models import DuplicateCategory


class TestKeeperSelector:
    """Test cases for KeeperSelector."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.selector = KeeperSelector()

    def test_identical_content_prefers_most_albums(self, make_asset, make_album) -> None:
        """Test that the asset in the most albums is kept."""
        assets = [make_asset("a", "a.jpg"), make_asset("b", "b.jpg"), make_asset("c", "c.jpg")]
        memberships = {
            "a": [],
            "b": [make_album("x"), make_album("y")],
            "c": [make_album("z")],
        }

        result = self.selector.select(assets, DuplicateCategory.IDENTICAL_CONTENT, memberships)

        assert isinstance(result, KeeperSelection)
        assert result.keeper.id == "b"
        assert result.delete_ids == ["a", "c"]

    def test_identical_content_favorite_breaks_tie(self, make_asset, make_album) -> None:
        """Test that a favorite wins when album counts are equal."""
        assets = [make_asset("a", "a.jpg"), make_asset("b", "b.jpg", favorite=True)]
        memberships = {"a": [make_album("x")], "b": [make_album("y")]}

        result = self.selector.select(assets, DuplicateCategory.IDENTICAL_CONTENT, memberships)

        assert result.keeper.id == "b"

    def test_identical_content_original_order_breaks_tie(self, make_asset) -> None:
        """Test that the first asset wins a full tie."""
        assets = [make_asset("a", "a.jpg"), make_asset("b", "b.jpg"), make_asset("c", "c.jpg")]
        memberships = {"a": [], "b": [], "c": []}

        result = self.selector.select(assets, DuplicateCategory.IDENTICAL_CONTENT, memberships)

        assert result.keeper.id == "a"
        assert result.delete_ids == ["b", "c"]

    def test_identical_content_requires_memberships(self, make_asset) -> None:
        """Test that album memberships are mandatory for identical content."""
        assets = [make_asset("a", "a.jpg"), make_asset("b", "b.jpg")]

        with pytest.raises(ValueError, match="memberships"):
            self.selector.select(assets, DuplicateCategory.IDENTICAL_CONTENT)

    @pytest.mark.parametrize(
        "category",
        [DuplicateCategory.NAME_DATE_MATCH, DuplicateCategory.TIME_MATCH_NAME_MISMATCH],
    )
    def test_keeps_largest_file(self, make_asset, category) -> None:
        """Test that the largest file is kept."""
        assets = [
            make_asset("small", "a.jpg", size=1_000),
            make_asset("large", "b.jpg", size=5_000),
            make_asset("medium", "c.jpg", size=3_000),
        ]

        result = self.selector.select(assets, category)

        assert result.keeper.id == "large"
        assert result.delete_ids == ["small", "medium"]

    def test_missing_size_counts_as_zero(self, make_asset) -> None:
        """Test that an asset without size loses to any sized asset."""
        assets = [make_asset("unknown", "a.jpg"), make_asset("sized", "b.jpg", size=1)]

        result = self.selector.select(assets, DuplicateCategory.NAME_DATE_MATCH)

        assert result.keeper.id == "sized"

    def test_size_tie_prefers_favorite(self, make_asset) -> None:
        """Test that a favorite wins when sizes are equal."""
        assets = [
            make_asset("plain", "a.jpg", size=100),
            make_asset("fav", "b.jpg", size=100, favorite=True),
        ]

        result = self.selector.select(assets, DuplicateCategory.NAME_DATE_MATCH)

        assert result.keeper.id == "fav"

    def test_tie_break_uses_position_in_given_order(self, make_asset) -> None:
        """Test that exact ties are resolved by the order assets are passed in."""
        first = make_asset("first", "a.jpg", size=100)
        second = make_asset("second", "b.jpg", size=100)

        assert self.selector.select([first, second], DuplicateCategory.NAME_DATE_MATCH).keeper is first
        assert self.selector.select([second, first], DuplicateCategory.NAME_DATE_MATCH).keeper is second

    def test_selection_is_deterministic(self, make_asset) -> None:
        """Test that repeated selection yields the same keeper."""
        assets = [make_asset(str(i), f"{i}.jpg", size=10) for i in range(5)]

        keepers = {
            self.selector.select(assets, DuplicateCategory.TIME_MATCH_NAME_MISMATCH).keeper.id
            for _ in range(10)
        }

        assert keepers == {"0"}

    def test_requires_two_assets(self, make_asset) -> None:
        """Test that a single asset cannot be split into keeper and duplicates."""
        with pytest.raises(ValueError, match="at least 2"):
            self.selector.select([make_asset("a", "a.jpg")], DuplicateCategory.NAME_DATE_MATCH)

    @pytest.mark.parametrize(
        "category",
        [
            DuplicateCategory.EXTENSION_MISMATCH,
            DuplicateCategory.BURST_SEQUENCE,
            DuplicateCategory.UNCHANGED,
        ],
    )
    def test_stack_categories_have_no_keeper(self, make_asset, category) -> None:
        """Test that categories without deletion reject keeper selection."""
        assets = [make_asset("a", "a.jpg"), make_asset("b", "a.raw")]

        with pytest.raises(ValueError, match="no keeper"):
            self.selector.select(assets, category)
