"""Data models for check results, Gitea statuses and build platform objects."""

from boostsec.gitea_checks.models.build import (
    InlineFlowDefinition,
    Job,
    Run,
    ScmFlowDefinition,
)
from boostsec.gitea_checks.models.check_result import (
    CheckResult,
    ChecksAction,
    ChecksAnnotation,
    ChecksAnnotationLevel,
    ChecksConclusion,
    ChecksImage,
    ChecksOutput,
    ChecksStatus,
)
from boostsec.gitea_checks.models.commit_status import (
    GiteaCommitState,
    GiteaCommitStatus,
)
from boostsec.gitea_checks.models.credentials import Credentials
from boostsec.gitea_checks.models.descriptor import BuildDescriptor, CredentialsEntry
from boostsec.gitea_checks.models.scm import (
    BranchRevision,
    GiteaSCMSource,
    GitSCM,
    GitSCMSource,
    NullSCM,
    OtherRevision,
    PullRequestRevision,
    SCMHead,
    SCMRevisionAction,
    UnsupportedSCM,
    UserRemoteConfig,
)

__all__ = [
    "BranchRevision",
    "BuildDescriptor",
    "CheckResult",
    "ChecksAction",
    "ChecksAnnotation",
    "ChecksAnnotationLevel",
    "ChecksConclusion",
    "ChecksImage",
    "ChecksOutput",
    "ChecksStatus",
    "Credentials",
    "CredentialsEntry",
    "GitSCM",
    "GitSCMSource",
    "GiteaCommitState",
    "GiteaCommitStatus",
    "GiteaSCMSource",
    "InlineFlowDefinition",
    "Job",
    "NullSCM",
    "OtherRevision",
    "PullRequestRevision",
    "Run",
    "SCMHead",
    "SCMRevisionAction",
    "ScmFlowDefinition",
    "UnsupportedSCM",
    "UserRemoteConfig",
]
