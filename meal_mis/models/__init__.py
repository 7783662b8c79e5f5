"""ORM model package."""

from meal_mis.models.entities import (
    BaselineSurvey,
    BrandingSettings,
    Complaint,
    CrmAwareness,
    Distribution,
    Enumerator,
    Evaluation,
    FieldVisit,
    Finding,
    MonthlyReport,
    PdmReport,
    PdmSurvey,
    Project,
    ProjectBeneficiary,
    ProjectCluster,
    ProjectCommunity,
    ProjectDistrict,
    ProjectProvince,
    ProjectStandardSector,
    Story,
    User,
)

__all__ = [
    "BaselineSurvey",
    "BrandingSettings",
    "Complaint",
    "CrmAwareness",
    "Distribution",
    "Enumerator",
    "Evaluation",
    "FieldVisit",
    "Finding",
    "MonthlyReport",
    "PdmReport",
    "PdmSurvey",
    "Project",
    "ProjectBeneficiary",
    "ProjectCluster",
    "ProjectCommunity",
    "ProjectDistrict",
    "ProjectProvince",
    "ProjectStandardSector",
    "Story",
    "User",
]
