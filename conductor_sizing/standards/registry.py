from typing import Dict

from conductor_sizing.core.calculator import StandardRules
from conductor_sizing.core.models import Standard
from conductor_sizing.standards.iec import IECRules
from conductor_sizing.standards.nec import NECRules

# Closed set: adding a Standard member without a rule set fails the registry test
RULES: Dict[Standard, StandardRules] = {
    Standard.IEC: IECRules(),
    Standard.NEC: NECRules(),
}


def get_rules(standard: Standard) -> StandardRules:
    return RULES[standard]
