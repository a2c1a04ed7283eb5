"""Tests for the studio controller's synchronous operations."""

import pytest

from stylemorph.errors import NotFoundError, ValidationError
from stylemorph.models import Angle, ClothingOrigin, Pose


class TestModels:
    """Tests for the model library operations."""

    def test_upload_selects_new_model(self, studio):
        model = studio.upload_model("model://a")

        assert studio.state.models.list() == [model]
        assert studio.state.selected_model == model

    def test_select_advances_from_step_one(self, studio):
        """Picking a model on step 1 moves the wizard to step 2."""
        model = studio.upload_model("model://a")

        studio.select_model(model.id)

        assert studio.state.step == 2

    def test_select_on_later_step_keeps_step(self, studio):
        model = studio.upload_model("model://a")
        studio.set_step(3)

        studio.select_model(model.id)

        assert studio.state.step == 3

    def test_select_unknown_raises(self, studio):
        with pytest.raises(NotFoundError):
            studio.select_model("missing")

    def test_delete_selected_clears_selection(self, studio):
        model = studio.upload_model("model://a")

        studio.delete_model(model.id)

        assert studio.state.selected_model is None
        assert studio.snapshot().is_ready is False

    def test_delete_unknown_is_noop(self, studio):
        version = studio.state.version

        assert studio.delete_model("missing") is None
        assert studio.state.version == version


class TestClothing:
    """Tests for the clothing library operations."""

    def test_presets_available_at_start(self, studio):
        ids = [c.id for c in studio.state.clothing.list()]

        assert ids == ["p1", "p2", "p3", "p4"]

    def test_upload_inserts_first_and_selects(self, studio):
        clothing = studio.upload_clothing("clothing://a", display_name="My jacket")

        assert studio.state.clothing.list()[0] == clothing
        assert clothing.origin == ClothingOrigin.UPLOADED
        assert studio.state.selected_clothing == clothing

    def test_delete_selected_preset(self, studio):
        preset = studio.select_clothing("p2")

        studio.delete_clothing(preset.id)

        assert studio.state.selected_clothing is None
        assert studio.state.clothing.find("p2") is None

    def test_delete_other_keeps_selection(self, studio):
        selected = studio.select_clothing("p1")

        studio.delete_clothing("p3")

        assert studio.state.selected_clothing == selected


class TestDrafts:
    """Tests for draft editing."""

    @pytest.mark.asyncio
    async def test_update_draft_keeps_position(self, studio, fake_service):
        fake_service.descriptions = ["red wool coat", "grey beanie", "black boots"]
        drafts = await studio.analyze_clothing("ref://photo")

        updated = studio.update_draft(drafts[1].id, "navy peacoat")

        assert updated.id == drafts[1].id
        assert [d.text for d in studio.state.drafts.list()] == [
            "red wool coat", "navy peacoat", "black boots",
        ]
        assert studio.state.drafts.find(drafts[1].id).text == "navy peacoat"

    def test_update_unknown_raises(self, studio):
        with pytest.raises(NotFoundError):
            studio.update_draft("missing", "text")

    @pytest.mark.asyncio
    async def test_delete_draft(self, studio):
        [draft] = await studio.analyze_clothing("ref://photo")

        studio.delete_draft(draft.id)

        assert len(studio.state.drafts) == 0

    @pytest.mark.asyncio
    async def test_synthesize_unknown_draft_raises(self, studio):
        with pytest.raises(NotFoundError):
            await studio.synthesize_from_draft("missing")


class TestSynthesisParameters:
    """Tests for pose, angle and step selection."""

    def test_select_pose(self, studio):
        studio.select_pose(Pose.FASHION_POSE)

        assert studio.state.selected_pose == Pose.FASHION_POSE

    def test_toggle_adds_angles_in_selection_order(self, studio):
        studio.toggle_angle(Angle.THREE_QUARTER)
        studio.toggle_angle(Angle.SIDE)

        assert studio.state.selected_angles == [Angle.FRONT, Angle.THREE_QUARTER, Angle.SIDE]

    def test_toggle_removes_selected_angle(self, studio):
        studio.toggle_angle(Angle.BACK)

        assert studio.toggle_angle(Angle.FRONT) == [Angle.BACK]

    def test_last_angle_cannot_be_removed(self, studio):
        """Toggling off the only angle leaves the set unchanged."""
        version = studio.state.version

        assert studio.toggle_angle(Angle.FRONT) == [Angle.FRONT]
        assert studio.state.selected_angles == [Angle.FRONT]
        assert studio.state.version == version

    @pytest.mark.parametrize("step", [1, 2, 3])
    def test_set_valid_step(self, studio, step):
        assert studio.set_step(step) == step
        assert studio.state.step == step

    @pytest.mark.parametrize("step", [0, 4, -1])
    def test_set_invalid_step_raises(self, studio, step):
        with pytest.raises(ValidationError):
            studio.set_step(step)


class TestHistory:
    """Tests for deleting history records."""

    @pytest.mark.asyncio
    async def test_delete_history_record(self, studio):
        studio.upload_model("model://a")
        studio.select_clothing("p1")
        [record] = await studio.synthesize_batch()

        assert studio.delete_history(record.id) == record
        assert studio.snapshot().history == []

    def test_snapshot_tracks_version(self, studio):
        before = studio.snapshot().version
        studio.upload_model("model://a")

        assert studio.snapshot().version > before
