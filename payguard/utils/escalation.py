from payguard.constants import CRITICAL_OVERDUE_DAYS
from payguard.models.escalation import EscalationLevel

def calculate_escalation_level(days_overdue: int) -> EscalationLevel:
    """
    Maps days overdue to severity:
    - 0 days: INFO
    - 1-3 days: WARNING
    - >3 days: CRITICAL
    """
    if days_overdue == 0:
        return EscalationLevel.INFO
    elif 1 <= days_overdue <= CRITICAL_OVERDUE_DAYS:
        return EscalationLevel.WARNING
    else:
        return EscalationLevel.CRITICAL
