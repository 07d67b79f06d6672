"""
Voice Agent Demo Builder - Artifact Generator
Builds the prompts, config and documents that describe a client's agent

Every function here is a pure rendering of the client record. The only
non-deterministic value is the generation timestamp embedded in headers,
which callers may pin by passing `generated_at`.
"""
import json
from datetime import datetime
from typing import Dict, Optional

from demo_builder.models.client import (
    Client,
    ClientStatus,
    AfterHoursGoal,
    Tone,
    TransferCall,
    transfer_rule_to_dict
)
from demo_builder.services import knowledge_base, website_context
from demo_builder.utils import utcnow, to_iso


DEMO_MARKER = "# Type: DEMO AGENT"
PRODUCTION_MARKER = "# Type: PRODUCTION AGENT"

DEMO_BOUNDARY_WARNING = (
    "**Important:** This is a DEMO agent. Do NOT mention pricing, contracts, or "
    "specific scheduling times. Do NOT claim to book real appointments."
)
PRODUCTION_NOTE = "**Note:** This is a PRODUCTION agent with live integrations."

NOT_CONFIGURED = "[TO BE CONFIGURED]"

TONE_DESCRIPTIONS = {
    Tone.PROFESSIONAL: "Maintain a professional, courteous demeanor. Use clear, business-appropriate language.",
    Tone.FRIENDLY: "Be warm and approachable while maintaining professionalism. Use a conversational but respectful tone.",
    Tone.CASUAL: "Be relaxed and personable. Use everyday language and a warm, neighborly approach.",
    Tone.FORMAL: "Use formal, polished language. Maintain an elevated level of professionalism throughout.",
}

GOAL_INSTRUCTIONS = {
    AfterHoursGoal.LEAD_CAPTURE: """Your primary goal is to capture lead information for follow-up.
Always collect:
1. Caller's full name
2. Callback phone number
3. Brief description of service needed
4. Best time to reach them

Confirm all details before ending the call.""",
    AfterHoursGoal.VOICEMAIL: """Your goal is to take a detailed message for the business to review.
Collect:
1. Caller's name
2. Phone number
3. Detailed message
4. Urgency level (routine, soon, urgent)""",
    AfterHoursGoal.EMERGENCY_TRANSFER: """For urgent matters, offer to transfer to an emergency line.
For non-urgent matters, collect:
1. Caller's name
2. Phone number
3. Service needed
4. Preferred callback time""",
}

BOUNDARIES = """## Boundaries

DO NOT:
- Quote prices or estimates
- Promise specific appointment times
- Discuss contracts or agreements
- Make commitments on behalf of the business
- Provide technical advice beyond general information

ALWAYS:
- Collect caller contact information
- Confirm service area coverage
- Note urgency level
- Provide a clear next step"""

ERROR_HANDLING = """## Error Handling

If you don't understand:
"I want to make sure I get this right. Could you please repeat that?"

If asked something outside scope:
"That's a great question for our team. Let me make sure they call you back to discuss that directly."

If caller is frustrated:
"I understand, and I apologize for any inconvenience. Let me make sure someone gets back to you as soon as possible.\""""

ARTIFACT_FILENAMES = {
    "demo_config": "demo_client_config.json",
    "demo_system_prompt": "demo_system_prompt.txt",
    "client_test_instructions": "client_test_instructions.txt",
    "production_system_prompt": "production_system_prompt.txt",
}
CHECKLIST_FILENAME = "production_checklist.txt"


def _timestamp(generated_at: Optional[datetime]) -> str:
    return (generated_at or utcnow()).isoformat()


def render_transfer_rules(client: Client) -> str:
    """Numbered IF/THEN rules, or an empty string when there are none"""
    if not client.transfer_rules:
        return ""

    lines = []
    for i, rule in enumerate(client.transfer_rules, start=1):
        then = rule.action
        if isinstance(rule, TransferCall) and rule.phone:
            then += f" (Transfer to: {rule.phone})"
        lines.append(f"{i}. IF: {rule.condition}\n   THEN: {then}")

    return "\n## Transfer Rules\n" + "\n".join(lines)


# ==========================================
# System prompts
# ==========================================

def generate_demo_system_prompt(client: Client, generated_at: Optional[datetime] = None) -> str:
    """Full system prompt for the demo agent"""
    services = "\n".join(f"- {service}" for service in client.services)
    context = website_context.compose(client.website_data) or ""
    knowledge = knowledge_base.resolve(client.industry)

    return f"""# Voice Agent System Prompt
# Client: {client.business_name}
{DEMO_MARKER}
# Generated: {_timestamp(generated_at)}

---

## Identity & Role

You are a voice assistant for **{client.business_name}**, a {(client.industry or "").lower()} business serving {client.service_area}.

You handle incoming calls during after-hours periods. You are helpful, efficient, and represent the business professionally.

{DEMO_BOUNDARY_WARNING}

---

## Tone & Communication Style

{TONE_DESCRIPTIONS[client.tone]}

Key behaviors:
- Speak clearly and at a measured pace
- Confirm understanding before moving forward
- Be patient with callers who need time to explain
- Never interrupt the caller
- Use the business name naturally in conversation

---

## Business Information

**Business:** {client.business_name}
**Industry:** {client.industry}
**Service Area:** {client.service_area}

**Services Offered:**
{services}

**Hours of Operation:**
- Weekdays: {client.hours.weekday}
- Weekends: {client.hours.weekend}
- Timezone: {client.hours.timezone}

---

## After-Hours Behavior

{GOAL_INSTRUCTIONS[client.after_hours_goal]}
{render_transfer_rules(client)}

---

## Call Flow Guidelines

### Opening
"Thank you for calling {client.business_name}. We're currently closed, but I can help you. How may I assist you today?"

### During the Call
1. Listen to the caller's request
2. Confirm you understand their need
3. Collect required information
4. Repeat back details for accuracy

### Closing
"Thank you for calling {client.business_name}. Someone from our team will reach out to you [timeframe]. Have a great [day/evening]!"

---

{BOUNDARIES}

---

{ERROR_HANDLING}
{context}
---

{knowledge}

---

# END OF DEMO SYSTEM PROMPT
"""


def generate_production_system_prompt(client: Client, generated_at: Optional[datetime] = None) -> str:
    """
    Demo prompt switched to production markers, plus the production addendum.

    Missing production details render as "[TO BE CONFIGURED]".
    """
    prompt = generate_demo_system_prompt(client, generated_at)
    prompt = prompt.replace(DEMO_MARKER, PRODUCTION_MARKER, 1)
    prompt = prompt.replace(DEMO_BOUNDARY_WARNING, PRODUCTION_NOTE, 1)

    details = client.production_details
    voice_id = (details and details.voice_id) or NOT_CONFIGURED
    phone_number = (details and details.phone_number) or NOT_CONFIGURED
    crm = (details and details.crm_integration) or NOT_CONFIGURED
    calendar = (details and details.calendar_integration) or NOT_CONFIGURED

    return prompt + f"""

---

## Production Configuration

### Voice
- Voice ID: {voice_id}

### Phone
- Number: {phone_number}

### Integrations
- CRM: {crm}
- Calendar: {calendar}

---

## Production Behaviors

### Real Booking Capability
When a caller requests an appointment:
1. Check calendar availability via integration
2. Offer available time slots
3. Confirm booking details
4. Send confirmation via SMS/email

### CRM Logging
All calls should be logged with:
- Caller information
- Call duration
- Outcome (booked, lead captured, transferred, etc.)
- Notes and follow-up required

### SMS Follow-up
After capturing a lead, send automated SMS:
"Hi [Name], thanks for calling {client.business_name}! We received your request for [service] and will contact you within [timeframe]. Reply STOP to opt out."

---

## Error Handling & Reliability

### Fallback Behavior
If integrations fail:
1. Inform caller of temporary issue
2. Collect information manually
3. Promise callback within 1 business hour
4. Log incident for review

### Call Quality
- Monitor for audio issues
- Gracefully handle poor connections
- Offer callback if quality is poor

---

## Compliance

- Do not record without consent where required
- Follow TCPA guidelines for SMS
- Respect do-not-call requests
- Handle PHI appropriately if medical-related

---

# END OF PRODUCTION SYSTEM PROMPT
"""


# ==========================================
# Documents
# ==========================================

def generate_client_test_instructions(client: Client, generated_at: Optional[datetime] = None) -> str:
    """Test script handed to the client along with the demo"""
    sample_services = ", ".join(client.services[:3])
    urgent_steps = [
        "- Call with an urgent issue",
        "- See how the agent prioritizes and responds",
    ]
    if client.after_hours_goal == AfterHoursGoal.EMERGENCY_TRANSFER:
        urgent_steps.append("- Test if transfer offer is made appropriately")
    urgent = "\n".join(urgent_steps)

    return f"""# Demo Test Instructions
# Client: {client.business_name}
# Generated: {_timestamp(generated_at)}

---

## Overview

You have been set up with a demo voice agent for {client.business_name}. This document explains how to test the agent and what to evaluate.

---

## How to Test

1. **Call the demo number** provided separately
2. **The agent will answer** as if it were after-hours
3. **Try different scenarios** listed below
4. **Take notes** on what works and what needs adjustment

---

## Test Scenarios to Try

### Scenario 1: New Customer Inquiry
- Call as if you're a new customer
- Ask about one of these services: {sample_services}
- See if the agent collects your information correctly

### Scenario 2: Service Area Check
- Ask if they service a location within: {client.service_area}
- Ask if they service a location OUTSIDE the area
- Note how the agent handles both

### Scenario 3: Urgent Request
{urgent}

### Scenario 4: Edge Cases
- Ask about pricing (agent should NOT quote prices)
- Ask for a specific appointment time (agent should NOT commit)
- Be vague and see if agent asks clarifying questions
- Speak quickly or mumble slightly

---

## What to Evaluate

Rate each item 1-5 (1=Poor, 5=Excellent):

| Item | Rating | Notes |
|------|--------|-------|
| Opening greeting | ___ | |
| Tone of voice | ___ | |
| Understanding requests | ___ | |
| Information collection | ___ | |
| Handling boundaries | ___ | |
| Closing statement | ___ | |
| Overall experience | ___ | |

---

## Feedback Questions

1. Does the agent sound like it represents {client.business_name} well?

2. Is the tone ({client.tone.value}) appropriate for your customers?

3. Were there any phrases that felt unnatural or incorrect?

4. What would you change about the call flow?

5. Are there scenarios we missed that your callers commonly have?

---

## Next Steps

After testing, we will:
1. Review your feedback together
2. Make adjustments to the agent
3. Re-test if needed
4. Once approved, proceed to production setup

**Questions?** Contact your account manager.

---

# END OF TEST INSTRUCTIONS
"""


def build_demo_config(client: Client, generated_at: Optional[datetime] = None) -> Dict:
    """Machine-readable demo agent configuration"""
    return {
        "schema_version": "1.0",
        "agent_type": "demo",
        "generated_at": _timestamp(generated_at),
        "business": {
            "name": client.business_name,
            "industry": client.industry,
            "services": list(client.services),
            "service_area": client.service_area,
        },
        "hours": client.hours.to_dict(),
        "agent_behavior": {
            "after_hours_goal": client.after_hours_goal.value,
            "tone": client.tone.value,
            "transfer_rules": [transfer_rule_to_dict(r) for r in client.transfer_rules],
        },
        "demo_settings": {
            "voice_provider": "standard",
            "phone_type": "temporary",
            "integrations": {
                "calendar": "simulated",
                "crm": "simulated",
                "sms": "disabled",
            },
        },
        "lead_capture": {
            "required_fields": ["name", "phone", "service_needed"],
            "optional_fields": ["email", "address", "notes"],
        },
    }


def generate_demo_config(client: Client, generated_at: Optional[datetime] = None) -> str:
    return json.dumps(build_demo_config(client, generated_at), indent=2)


def generate_production_checklist(client: Client) -> str:
    """Install checklist for an approved client"""
    details = client.production_details
    approved_at = to_iso(details.approved_at) if details and details.approved_at else "Pending"

    return f"""# Production Install Checklist
# Client: {client.business_name}
# Approved: {approved_at}

---

## Pre-Installation

- [ ] Demo approved by client
- [ ] Production contract signed
- [ ] Payment method on file
- [ ] Client contact designated for setup

---

## Voice Setup

- [ ] Create or select voice profile
- [ ] Voice ID: ________________________________
- [ ] Test voice quality
- [ ] Client approves voice
- [ ] Configure voice settings (speed, stability, etc.)

---

## Phone Setup

- [ ] Purchase or port phone number
- [ ] Phone Number: ________________________________
- [ ] Configure call routing
- [ ] Set up failover number
- [ ] Test inbound calls
- [ ] Test call quality

---

## CRM Integration

- [ ] Identify CRM system: ________________________________
- [ ] Obtain API credentials
- [ ] Map data fields
- [ ] Test lead creation
- [ ] Test contact lookup
- [ ] Verify data sync

---

## Calendar Integration

- [ ] Identify calendar system: ________________________________
- [ ] Obtain OAuth/API access
- [ ] Configure availability rules
- [ ] Test booking creation
- [ ] Test conflict detection
- [ ] Verify notifications

---

## SMS/Email Setup

- [ ] Configure SMS sender ID
- [ ] Create message templates
- [ ] Test delivery
- [ ] Verify opt-out handling
- [ ] Set up email notifications

---

## Final Testing

- [ ] End-to-end call test
- [ ] Booking flow test
- [ ] Lead capture test
- [ ] Transfer test
- [ ] Error handling test
- [ ] Client walkthrough

---

## Go-Live

- [ ] Schedule go-live date: ________________________________
- [ ] Update business phone routing
- [ ] Monitor first 24 hours
- [ ] Address any issues
- [ ] Client confirmation

---

## Post-Launch

- [ ] Set up analytics dashboard
- [ ] Schedule weekly review (first month)
- [ ] Document any customizations
- [ ] Training for client team (if needed)

---

# Completed By: ________________________________
# Date: ________________________________
"""


def build_artifact_bundle(client: Client) -> Dict[str, str]:
    """
    Generated artifacts keyed by download filename.

    Only artifacts that exist are included; approved and production clients
    also get the install checklist.
    """
    artifacts = client.artifacts.to_dict()
    bundle = {
        filename: artifacts[kind]
        for kind, filename in ARTIFACT_FILENAMES.items()
        if artifacts.get(kind)
    }
    if client.status in (ClientStatus.APPROVED, ClientStatus.PRODUCTION):
        bundle[CHECKLIST_FILENAME] = generate_production_checklist(client)
    return bundle
