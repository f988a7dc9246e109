"""Integration tests: end-to-end operator and customer sessions."""

from masterplan.state.models import Pin


class TestDistrictScenario:
    """Master plan -> district -> back."""

    def test_navigate_add_and_return(self, store):
        """Test the basic drill-down session."""
        assert store.current_level_id == "master"
        assert store.history == ()

        store.navigate_to_level("dist-1", "District 1")
        assert store.history == ("master",)
        assert store.current_level_id == "dist-1"

        p1 = Pin(id="p1", level_id="dist-1", lat=10, lng=10, name="Gate")
        store.add_pin(p1)
        assert store.current_level_pins() == [p1]

        store.go_back()
        assert store.current_level_id == "master"
        assert store.history == ()
        assert p1 not in store.current_level_pins()

    def test_admin_toggle_round_trip(self, store):
        """Test toggling twice restores the flag and the delete affordance."""
        before = store.is_admin_mode
        store.toggle_admin_mode()
        assert store.show_delete_affordance is (not before)
        store.toggle_admin_mode()
        assert store.is_admin_mode is before
        assert store.show_delete_affordance is before


class TestOperatorSession:
    """Operator builds a three-level hierarchy, customer browses it."""

    def test_build_then_browse(self, store):
        """Test master -> district -> building with portal pins."""
        store.update_level_image("master", "images/MasterPlan.jpg")
        store.toggle_admin_mode()

        district = store.create_pin(
            store.pin_variant_for_current_level()(name="B1", target_level_image="images/B1.jpg"),
            250, 250
        )
        store.drill_down(district.id)
        assert store.current_level.image_url == "images/B1.jpg"

        building = store.create_pin(
            store.pin_variant_for_current_level(is_building=True)(
                name="Tower 31", block_number="31", target_level_image="images/31.jpg"
            ),
            400, 400
        )
        assert building.is_building is True
        store.drill_down(building.id)
        assert store.history == ("master", f"level-{district.id}")

        store.go_back()
        store.go_back()
        store.enter_customer_only_route()

        assert store.current_level_id == "master"
        assert store.is_admin_mode is False
        assert store.create_pin(store.pin_variant_for_current_level()(name="x"), 900, 900) is None

        store.drill_down(district.id)
        store.drill_down(building.id)
        assert store.current_level.name == "Tower 31"
        assert store.current_level_pins() == []

    def test_clearing_district_image_drops_its_pins(self, store):
        """Test removing a district image wipes its pins but not its children."""
        store.toggle_admin_mode()
        district = store.create_pin(
            store.pin_variant_for_current_level()(name="B1", target_level_image="images/B1.jpg"),
            250, 250
        )
        store.drill_down(district.id)
        store.create_pin(store.pin_variant_for_current_level()(name="Sub", region="b11"), 10, 10)
        store.create_pin(store.pin_variant_for_current_level()(name="Sub 2", region="b12"), 500, 10)
        assert len(store.current_level_pins()) == 2

        store.remove_level_image(store.current_level_id)

        assert store.current_level.image_url is None
        assert store.current_level_pins() == []
        assert [p.id for p in store.pins] == [district.id]
