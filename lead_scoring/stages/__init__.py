# Scoring stages module
from .person_scoring import PersonScoringStage
from .company_scoring import CompanyScoringStage
