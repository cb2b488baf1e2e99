"""
srm_services -- Orchestration over the SRM engines.

Services receive a RepositoryGateway by constructor injection and are the
only layer that reads or writes the repository:

    - GradingRuleBook / GradingService: editable grading rule, supplier grading.
    - PreprocessingSession: interactive import normalization and submit.
    - QualificationLedger: per-supplier qualification records.
    - seed_repository: one-time demo catalogue.
"""

from srm_services.grading import GradingReport, GradingRuleBook, GradingService, SupplierGrade
from srm_services.preprocessing import PreprocessingSession
from srm_services.qualifications import QualificationLedger
from srm_services.seeding import SeedSummary, seed_repository

__all__ = [
    "GradingReport",
    "GradingRuleBook",
    "GradingService",
    "PreprocessingSession",
    "QualificationLedger",
    "SeedSummary",
    "SupplierGrade",
    "seed_repository",
]
