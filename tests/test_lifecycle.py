"""
Voice Agent Demo Builder - Lifecycle Tests
"""
import pytest

from demo_builder.exceptions import PreconditionError
from demo_builder.models.client import ClientStatus, AfterHoursGoal, Tone, create_client
from demo_builder.services import lifecycle_service
from demo_builder.services.lifecycle_service import (
    apply_changes,
    approve,
    apply_scraped_data,
    generate_demo_artifacts,
    generate_production_artifacts,
    promote_to_production,
    publish_to_production
)

from conftest import FIXED_NOW


class TestPureTransitions:
    """Test the state machine on in-memory records"""

    def test_generate_demo_moves_draft_to_demo_ready(self, plumber):
        updated = generate_demo_artifacts(plumber, FIXED_NOW)

        assert updated.status == ClientStatus.DEMO_READY
        assert updated.artifacts.demo_system_prompt
        assert updated.artifacts.demo_config
        assert updated.artifacts.client_test_instructions
        assert updated.artifacts.production_system_prompt is None
        assert updated.updated_at == FIXED_NOW
        # Caller's record untouched
        assert plumber.status == ClientStatus.DRAFT
        assert plumber.artifacts.demo_system_prompt is None

    def test_approve_requires_demo_ready(self, plumber):
        with pytest.raises(PreconditionError) as exc:
            approve(plumber, FIXED_NOW)

        assert exc.value.status == "draft"
        assert exc.value.operation == "approve"
        assert plumber.status == ClientStatus.DRAFT

    def test_approve_stamps_approved_at(self, plumber):
        approved = approve(generate_demo_artifacts(plumber, FIXED_NOW), FIXED_NOW)

        assert approved.status == ClientStatus.APPROVED
        assert approved.production_details.approved_at == FIXED_NOW

    def test_cannot_approve_twice(self, plumber):
        approved = approve(generate_demo_artifacts(plumber, FIXED_NOW), FIXED_NOW)

        with pytest.raises(PreconditionError):
            approve(approved, FIXED_NOW)

    def test_production_artifacts_rejected_for_draft(self, plumber):
        with pytest.raises(PreconditionError):
            generate_production_artifacts(plumber, FIXED_NOW)

        assert plumber.artifacts.production_system_prompt is None

    def test_production_artifacts_rejected_for_demo_ready(self, plumber):
        demo = generate_demo_artifacts(plumber, FIXED_NOW)

        with pytest.raises(PreconditionError):
            generate_production_artifacts(demo, FIXED_NOW)

    def test_production_artifacts_keep_status(self, plumber):
        approved = approve(generate_demo_artifacts(plumber, FIXED_NOW), FIXED_NOW)

        updated = generate_production_artifacts(approved, FIXED_NOW)

        assert updated.status == ClientStatus.APPROVED
        assert "# Type: PRODUCTION AGENT" in updated.artifacts.production_system_prompt

    def test_regenerate_after_approval_keeps_status(self, plumber):
        approved = approve(generate_demo_artifacts(plumber, FIXED_NOW), FIXED_NOW)

        regenerated = generate_demo_artifacts(approved, FIXED_NOW)

        assert regenerated.status == ClientStatus.APPROVED

    def test_promote_requires_approved(self, plumber):
        demo = generate_demo_artifacts(plumber, FIXED_NOW)

        with pytest.raises(PreconditionError) as exc:
            promote_to_production(demo, FIXED_NOW)

        assert exc.value.status == "demo_ready"

    def test_promote(self, plumber):
        approved = approve(generate_demo_artifacts(plumber, FIXED_NOW), FIXED_NOW)

        live = promote_to_production(approved, FIXED_NOW)

        assert live.status == ClientStatus.PRODUCTION
        assert live.artifacts.production_system_prompt

    def test_publish_renders_details(self, plumber):
        approved = approve(generate_demo_artifacts(plumber, FIXED_NOW), FIXED_NOW)

        live = publish_to_production(approved, "v123", "+15125550100", FIXED_NOW)

        assert live.status == ClientStatus.PRODUCTION
        assert live.production_details.voice_id == "v123"
        assert live.production_details.approved_at == FIXED_NOW
        assert "- Voice ID: v123" in live.artifacts.production_system_prompt
        assert "- Number: +15125550100" in live.artifacts.production_system_prompt
        assert approved.production_details.voice_id is None

    def test_publish_without_phone(self, plumber):
        approved = approve(generate_demo_artifacts(plumber, FIXED_NOW), FIXED_NOW)

        live = publish_to_production(approved, "v123", now=FIXED_NOW)

        assert live.production_details.phone_number is None
        assert "- Number: [TO BE CONFIGURED]" in live.artifacts.production_system_prompt

    def test_no_transitions_out_of_production(self, plumber):
        approved = approve(generate_demo_artifacts(plumber, FIXED_NOW), FIXED_NOW)
        live = promote_to_production(approved, FIXED_NOW)

        for transition in (approve, promote_to_production):
            with pytest.raises(PreconditionError):
                transition(live, FIXED_NOW)
        with pytest.raises(PreconditionError):
            publish_to_production(live, "v999", now=FIXED_NOW)

        # Regenerating either artifact set stays in production
        assert generate_demo_artifacts(live, FIXED_NOW).status == ClientStatus.PRODUCTION
        assert generate_production_artifacts(live, FIXED_NOW).status == ClientStatus.PRODUCTION


class TestScrapedData:
    """Test merging scraped website data"""

    def test_merge_services_and_context(self, plumber):
        updated = apply_scraped_data(plumber, {
            'description': 'Family owned',
            'services': ['Water Heater', 'Sewer Line'],
        }, FIXED_NOW)

        assert updated.services == ["Drain Cleaning", "Water Heater", "Sewer Line"]
        assert updated.website_data.description == 'Family owned'
        assert plumber.website_data is None

    def test_services_capped(self):
        client = create_client("A", "Plumbing", "Here", services=["One"])

        updated = apply_scraped_data(client, {'services': [f"S{i}" for i in range(20)]}, FIXED_NOW)

        assert len(updated.services) == lifecycle_service.MAX_SERVICES_FROM_SCRAPE
        assert updated.services[0] == "One"

    def test_fills_empty_fields_only(self):
        client = create_client("", "Plumbing", "")
        filled = apply_scraped_data(client, {'businessName': 'Joe', 'serviceArea': 'Austin'}, FIXED_NOW)

        assert filled.business_name == 'Joe'
        assert filled.service_area == 'Austin'

        kept = apply_scraped_data(filled, {'businessName': 'Other'}, FIXED_NOW)
        assert kept.business_name == 'Joe'


class TestLifecycleService:
    """Test lifecycle operations against the record store"""

    def test_create_and_get(self, lifecycle, clock):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")

        stored = lifecycle.get_client(client.id)
        assert stored.business_name == "Joe's Plumbing"
        assert stored.status == ClientStatus.DRAFT
        assert stored.created_at == clock()

    def test_unknown_id_returns_none(self, lifecycle):
        assert lifecycle.get_client("client_missing") is None
        assert lifecycle.approve("client_missing") is None
        assert lifecycle.update_client("client_missing", {'tone': 'casual'}) is None
        assert lifecycle.delete_client("client_missing") == False

    def test_rejected_transition_leaves_store_unchanged(self, lifecycle):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")

        with pytest.raises(PreconditionError):
            lifecycle.generate_production_artifacts(client.id)

        stored = lifecycle.get_client(client.id)
        assert stored.status == ClientStatus.DRAFT
        assert stored.artifacts.production_system_prompt is None
        assert stored.to_dict() == client.to_dict()

    def test_update_keeps_status(self, lifecycle):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")
        lifecycle.generate_demo_artifacts(client.id)
        lifecycle.approve(client.id)

        updated = lifecycle.update_client(client.id, {
            'tone': 'casual',
            'hours': {'weekend': 'Emergency Only'},
            'status': 'draft'
        })

        assert updated.status == ClientStatus.APPROVED
        assert updated.tone == Tone.CASUAL
        assert updated.hours.weekend == 'Emergency Only'
        assert updated.hours.weekday == '9:00 AM - 5:00 PM'

    def test_update_with_regenerate(self, lifecycle, clock):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")
        lifecycle.generate_demo_artifacts(client.id)
        lifecycle.approve(client.id)
        clock.advance(hours=1)

        updated = lifecycle.update_client(client.id, {'services': ['Sewer Line']}, regenerate=True)

        assert updated.status == ClientStatus.APPROVED
        assert "- Sewer Line" in updated.artifacts.demo_system_prompt
        assert f"# Generated: {clock().isoformat()}" in updated.artifacts.demo_system_prompt

    def test_update_rejects_bad_enum(self, lifecycle):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")

        with pytest.raises(ValueError):
            lifecycle.update_client(client.id, {'tone': 'grumpy'})

        assert lifecycle.get_client(client.id).tone == Tone.PROFESSIONAL

    def test_list_clients_by_status(self, lifecycle, clock):
        first = lifecycle.create_client("First", "HVAC", "Here")
        clock.advance(minutes=1)
        second = lifecycle.create_client("Second", "HVAC", "Here")
        lifecycle.generate_demo_artifacts(second.id)

        assert [c.id for c in lifecycle.list_clients()] == [second.id, first.id]
        assert [c.id for c in lifecycle.list_clients(ClientStatus.DEMO_READY)] == [second.id]

    def test_quick_create(self, lifecycle):
        client = lifecycle.quick_create("Cool Air", "HVAC", "Phoenix, AZ", scraped={'tagline': 'Stay cool'})

        assert client.status == ClientStatus.DEMO_READY
        assert client.after_hours_goal == AfterHoursGoal.EMERGENCY_TRANSFER
        assert "AC Repair" in client.services
        assert '"Stay cool"' in client.artifacts.demo_system_prompt
        assert lifecycle.get_client(client.id).status == ClientStatus.DEMO_READY

    def test_joes_plumbing_end_to_end(self, lifecycle):
        client = lifecycle.create_client(
            "Joe's Plumbing", "Plumbing", "Austin, TX",
            services=["Drain Cleaning"],
            after_hours_goal=AfterHoursGoal.EMERGENCY_TRANSFER
        )

        demo = lifecycle.generate_demo_artifacts(client.id)
        assert demo.status == ClientStatus.DEMO_READY
        assert "# Type: DEMO AGENT" in demo.artifacts.demo_system_prompt

        approved = lifecycle.approve(client.id)
        assert approved.status == ClientStatus.APPROVED
        assert approved.production_details.approved_at is not None

        live = lifecycle.publish(client.id, "v123")
        assert live.status == ClientStatus.PRODUCTION
        assert "v123" in live.artifacts.production_system_prompt

        stored = lifecycle.get_client(client.id)
        assert stored.status == ClientStatus.PRODUCTION
        assert stored.production_details.voice_id == "v123"
        assert stored.status_label == "Production"

    def test_delete_without_cascade_keeps_links(self, lifecycle, links):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")
        link = links.create_link(client, expires_in_days=7)

        assert lifecycle.delete_client(client.id) == True
        assert links.get_link(link.id) is not None

    def test_delete_with_cascade(self, lifecycle, links):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")
        link = links.create_link(client, expires_in_days=7)

        assert lifecycle.delete_client(client.id, cascade_links=True) == True
        assert links.get_link(link.id) is None


class TestApplyChanges:
    """Test field edits"""

    def test_edits_copy(self, plumber):
        updated = apply_changes(plumber, {'services': ['Sewer Line'], 'business_name': ' Joe & Sons '})

        assert updated.services == ['Sewer Line']
        assert updated.business_name == 'Joe & Sons'
        assert plumber.services == ["Drain Cleaning", "Water Heater"]

    def test_ignores_status_and_unknown_keys(self, plumber):
        updated = apply_changes(plumber, {'status': 'production', 'id': 'client_other', 'color': 'blue'})

        assert updated.status == ClientStatus.DRAFT
        assert updated.id == plumber.id

    @pytest.mark.parametrize('changes', [
        {'industry': None},
        {'business_name': ''},
        {'service_area': 42},
        {'services': 'Drain Cleaning'},
        {'services': ['ok', 3]},
        {'hours': 'always'},
        {'transfer_rules': ['gas smell']},
        {'transfer_rules': {'condition': 'gas smell'}},
        {'website_data': 'text'},
        {'tone': 'grumpy'},
    ])
    def test_rejects_bad_values(self, plumber, changes):
        with pytest.raises(ValueError):
            apply_changes(plumber, changes)

    def test_create_from_dict_stores_nothing_on_error(self, lifecycle, data_service):
        with pytest.raises(ValueError):
            lifecycle.create_client_from_dict({
                'business_name': "Joe's Plumbing",
                'industry': 'Plumbing',
                'service_area': 'Austin, TX',
                'hours': 'always'
            })

        assert data_service.get_stats()['clients'] == 0

    def test_create_from_dict(self, lifecycle, clock):
        client = lifecycle.create_client_from_dict({
            'business_name': "Joe's Plumbing",
            'industry': 'Plumbing',
            'service_area': 'Austin, TX',
            'tone': 'friendly',
            'hours': {'weekend': 'Emergency Only'},
            'status': 'production'
        })

        stored = lifecycle.get_client(client.id)
        assert stored.status == ClientStatus.DRAFT
        assert stored.tone == Tone.FRIENDLY
        assert stored.hours.weekend == 'Emergency Only'
        assert stored.hours.weekday == '9:00 AM - 5:00 PM'
        assert stored.created_at == clock()
