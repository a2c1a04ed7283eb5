"""Unit tests for the session state: libraries, selection guard and history."""

import pytest

from stylemorph.models import (
    Angle,
    ClothingAsset,
    ClothingOrigin,
    GenerationRecord,
    ModelAsset,
    Pose,
)
from stylemorph.state import AssetKind, AssetLibrary, HistoryLedger, SessionState


def make_record(angle=Angle.FRONT, result="result://x"):
    return GenerationRecord(
        model_image="model://a",
        clothing_image="clothing://a",
        result_image=result,
        pose=Pose.STANDING,
        angle=angle,
    )


class TestAssetLibrary:
    """Tests for the generic ordered library."""

    def test_insert_then_find(self):
        """An inserted item can be found by id."""
        library = AssetLibrary()
        model = library.insert_front(ModelAsset(image="model://a"))

        assert library.find(model.id) == model

    def test_remove_then_find(self):
        """A removed item is gone and is returned by remove()."""
        library = AssetLibrary()
        model = library.insert_front(ModelAsset(image="model://a"))

        assert library.remove(model.id) == model
        assert library.find(model.id) is None

    def test_remove_unknown_id_is_noop(self):
        """Removing an unknown id returns None and changes nothing."""
        library = AssetLibrary([ModelAsset(image="model://a")])

        assert library.remove("missing") is None
        assert len(library) == 1

    def test_insert_front_orders_newest_first(self):
        """Later inserts come first in list()."""
        library = AssetLibrary()
        first = library.insert_front(ModelAsset(image="model://1"))
        second = library.insert_front(ModelAsset(image="model://2"))

        assert [m.id for m in library.list()] == [second.id, first.id]

    def test_batch_insert_keeps_batch_order(self):
        """A batch is prepended as a block in its own order."""
        existing = ModelAsset(image="model://old")
        library = AssetLibrary([existing])
        batch = [ModelAsset(image="model://1"), ModelAsset(image="model://2")]

        library.insert_batch_front(batch)

        assert [m.image for m in library.list()] == ["model://1", "model://2", "model://old"]

    def test_list_is_a_snapshot(self):
        """Mutating the returned list does not touch the library."""
        library = AssetLibrary([ModelAsset(image="model://a")])
        snapshot = library.list()
        snapshot.clear()

        assert len(library) == 1

    def test_replace_keeps_position(self):
        """A replaced item takes the old one's slot."""
        first, second, third = (ModelAsset(image=f"model://{n}") for n in range(3))
        library = AssetLibrary([first, second, third])
        updated = second.model_copy(update={"image": "model://new"})

        assert library.replace(updated) is True
        assert [m.image for m in library.list()] == ["model://0", "model://new", "model://2"]
        assert library.find(second.id) == updated

    def test_replace_unknown_id(self):
        """Replacing an item that is not in the library changes nothing."""
        library = AssetLibrary([ModelAsset(image="model://a")])

        assert library.replace(ModelAsset(image="model://b")) is False
        assert [m.image for m in library.list()] == ["model://a"]

    def test_contains_by_id(self):
        model = ModelAsset(image="model://a")
        library = AssetLibrary([model])

        assert model.id in library
        assert "other" not in library


class TestSelectionGuard:
    """Tests for selection clearing on delete."""

    @pytest.fixture
    def state(self):
        return SessionState()

    def test_deleting_selected_model_clears_selection(self, state):
        """Removing the selected model clears selected_model."""
        model = state.models.insert_front(ModelAsset(image="model://a"))
        state.selected_model = model

        state.remove_model(model.id)

        assert state.selected_model is None

    def test_deleting_other_model_keeps_selection(self, state):
        """Removing a different model leaves the selection alone."""
        kept = state.models.insert_front(ModelAsset(image="model://a"))
        other = state.models.insert_front(ModelAsset(image="model://b"))
        state.selected_model = kept

        state.remove_model(other.id)

        assert state.selected_model == kept

    def test_deleting_selected_clothing_clears_selection(self, state):
        clothing = state.clothing.insert_front(
            ClothingAsset(image="clothing://a", origin=ClothingOrigin.UPLOADED)
        )
        state.selected_clothing = clothing

        state.remove_clothing(clothing.id)

        assert state.selected_clothing is None

    def test_match_is_by_image_handle(self, state):
        """An asset sharing the selected image handle clears the selection."""
        selected = state.clothing.insert_front(
            ClothingAsset(image="clothing://same", origin=ClothingOrigin.UPLOADED)
        )
        twin = state.clothing.insert_front(
            ClothingAsset(image="clothing://same", origin=ClothingOrigin.GENERATED)
        )
        state.selected_clothing = selected

        state.remove_clothing(twin.id)

        assert state.selected_clothing is None

    def test_unknown_id_keeps_selection(self, state):
        model = state.models.insert_front(ModelAsset(image="model://a"))
        state.selected_model = model

        assert state.guard.on_asset_removed(AssetKind.MODEL, state.models.remove("missing")) is False
        assert state.selected_model == model


class TestHistoryLedger:
    """Tests for the generation history."""

    def test_append_prepends_batch_in_order(self):
        """New batch precedes existing records, keeping its order."""
        ledger = HistoryLedger()
        old = make_record(result="result://old")
        ledger.append([old])

        front = make_record(Angle.FRONT, "result://front")
        back = make_record(Angle.BACK, "result://back")
        ledger.append([front, back])

        assert [r.result_image for r in ledger.list()] == [
            "result://front", "result://back", "result://old",
        ]

    def test_remove(self):
        ledger = HistoryLedger()
        record = make_record()
        ledger.append([record])

        assert ledger.remove(record.id) == record
        assert ledger.find(record.id) is None
        assert len(ledger) == 0

    def test_remove_unknown_is_noop(self):
        ledger = HistoryLedger()
        ledger.append([make_record()])

        assert ledger.remove("missing") is None
        assert len(ledger) == 1


class TestSessionState:
    """Tests for defaults and snapshots."""

    def test_defaults(self):
        """A fresh session starts at step 1 with presets and one angle."""
        state = SessionState()

        assert state.step == 1
        assert state.selected_pose == Pose.STANDING
        assert state.selected_angles == [Angle.FRONT]
        assert len(state.clothing) == 4
        assert all(c.origin == ClothingOrigin.PRESET for c in state.clothing.list())
        assert state.version == 0

    def test_touch_bumps_version(self):
        state = SessionState()

        assert state.touch() == 1
        assert state.touch() == 2

    def test_snapshot_is_detached(self):
        """Snapshots do not change when the session changes later."""
        state = SessionState()
        snapshot = state.snapshot()

        state.models.insert_front(ModelAsset(image="model://a"))
        state.selected_angles.append(Angle.BACK)

        assert snapshot.models == []
        assert snapshot.selected_angles == [Angle.FRONT]
        assert snapshot.is_ready is False
