"""IAM policy documents for IRSA-bound controllers."""

import json
from pathlib import Path

import pulumi


def load_policy_document(path: str | Path) -> str:
    """Read an IAM policy document from disk.

    Args:
        path: Path to a JSON policy document, relative to the program directory

    Returns:
        The document text, unchanged

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file is not valid JSON
    """
    path = Path(path)
    document = path.read_text()
    try:
        json.loads(document)
    except json.JSONDecodeError as e:
        raise ValueError(f"IAM policy document {path} is not valid JSON: {e}") from e

    pulumi.log.debug(f"Loaded IAM policy document from {path}")
    return document


def irsa_assume_role_policy(oidc_provider_arn: str, oidc_provider_url: str, subject: str) -> str:
    """Trust policy letting a single Kubernetes service account assume a role.

    Args:
        oidc_provider_arn: ARN of the cluster's IAM OIDC provider
        oidc_provider_url: Issuer URL of the provider (with or without scheme)
        subject: Service account subject, ``system:serviceaccount:<ns>:<name>``
    """
    issuer = oidc_provider_url.removeprefix("https://")

    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"Federated": oidc_provider_arn},
                    "Action": "sts:AssumeRoleWithWebIdentity",
                    "Condition": {
                        "StringEquals": {
                            f"{issuer}:sub": subject,
                        }
                    },
                }
            ],
        }
    )
