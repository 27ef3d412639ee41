from agency.db.models.agent import Agent, AgentTransaction
from agency.db.models.company import InsuranceCompany, InsuranceType, PricingType
from agency.db.models.customer import Customer, Vehicle
from agency.db.models.cheque import Cheque
from agency.db.models.policy import Payment, Policy
from agency.db.models.pricing import PricingRule, RoadService
from agency.db.models.ledger import Expense, Revenue

__all__ = [
    "Agent",
    "AgentTransaction",
    "InsuranceCompany",
    "InsuranceType",
    "PricingType",
    "Customer",
    "Vehicle",
    "Cheque",
    "Payment",
    "Policy",
    "PricingRule",
    "RoadService",
    "Expense",
    "Revenue",
]
