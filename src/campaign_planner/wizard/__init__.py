"""Campaign setup wizard: step machine plus per-country controller.

Re-exports key types for convenient access:
    from campaign_planner.wizard import CampaignWizard, WizardEvent
"""

from campaign_planner.wizard.controller import STEP_GATES, CampaignWizard, WizardSnapshot
from campaign_planner.wizard.machine import WizardStateMachine
from campaign_planner.wizard.transitions import TERMINAL_STEPS, TRANSITIONS, WizardEvent

__all__ = [
    "STEP_GATES",
    "TERMINAL_STEPS",
    "TRANSITIONS",
    "CampaignWizard",
    "WizardEvent",
    "WizardSnapshot",
    "WizardStateMachine",
]
