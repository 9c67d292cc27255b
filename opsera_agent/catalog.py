"""Static prompt and tool catalog.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.

Prompts and tools are closed sets of identifiers resolved once at import time.
Looking up an unknown identifier is the only way to get ``NotFound`` out of
this module; malformed tool arguments raise ``InvalidArguments``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from . import prompt_texts
from .errors import InvalidArguments, PromptNotFound, ToolNotFound


class PromptName(str, Enum):
    CREATE_PIPELINE = 'create-pipeline'
    SECURITY_AUDIT = 'security-audit'
    K8S_DEPLOY = 'k8s-deploy'
    DORA_REPORT = 'dora-report'


class ToolName(str, Enum):
    CREATE_PIPELINE = 'opsera_create_pipeline'
    SECURITY_SCAN = 'opsera_security_scan'
    DORA_METRICS = 'opsera_dora_metrics'


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    description: str
    body: str

    def summary(self) -> Dict[str, str]:
        return {'name': self.id, 'description': self.description}


def _entry(name: PromptName, description: str, body: str) -> CatalogEntry:
    return CatalogEntry(id=name.value, description=description, body=body.strip())


PROMPTS: Mapping[str, CatalogEntry] = MappingProxyType({
    entry.id: entry for entry in (
        _entry(PromptName.CREATE_PIPELINE,
               'Create production-ready CI/CD pipeline with security scanning and multi-environment deployments',
               prompt_texts.CREATE_PIPELINE),
        _entry(PromptName.SECURITY_AUDIT,
               'Comprehensive security audit with SAST, dependency scanning, and compliance framework mapping',
               prompt_texts.SECURITY_AUDIT),
        _entry(PromptName.K8S_DEPLOY,
               'Production Kubernetes deployment with security hardening, autoscaling, and observability',
               prompt_texts.K8S_DEPLOY),
        _entry(PromptName.DORA_REPORT,
               'Generate comprehensive DORA metrics report with performance analysis and improvement recommendations',
               prompt_texts.DORA_REPORT),
    )
})


# --- Tool argument records ---
Platform = Literal['github-actions', 'gitlab-ci', 'jenkins', 'azure-devops']
ScanType = Literal['full', 'secrets', 'vulnerabilities', 'compliance']
ComplianceFramework = Literal['soc2', 'hipaa', 'pci-dss', 'iso27001']


class CreatePipelineArgs(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)
    platform: Platform = 'github-actions'
    language: str = 'auto-detect'
    deployment_target: str = 'kubernetes'

    def render(self, body: str) -> str:
        return (
            '# CI/CD Pipeline Generation\n\n'
            '## Configuration\n'
            f'- **Platform**: {self.platform}\n'
            f'- **Language**: {self.language}\n'
            f'- **Deployment Target**: {self.deployment_target}\n\n'
            f'{body}\n\n'
            '---\n'
            f'Now analyze this project and generate a production-ready {self.platform} pipeline.'
        )


class SecurityScanArgs(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)
    scan_type: ScanType = 'full'
    compliance_framework: Optional[ComplianceFramework] = None

    def render(self, body: str) -> str:
        return (
            '# Security Scan\n\n'
            '## Configuration\n'
            f'- **Scan Type**: {self.scan_type}\n'
            f'- **Compliance Framework**: {self.compliance_framework or "None specified"}\n\n'
            f'{body}\n\n'
            '---\n'
            'Now execute the security scan and provide a detailed report.'
        )


class DoraMetricsArgs(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)
    period_days: int = Field(default=90, gt=0)

    def render(self, body: str) -> str:
        return (
            '# DORA Metrics Analysis\n\n'
            '## Configuration\n'
            f'- **Analysis Period**: {self.period_days} days\n\n'
            f'{body}'
        )


@dataclass(frozen=True)
class ToolDefinition:
    name: ToolName
    description: str
    prompt: PromptName
    arguments: Type[BaseModel]
    input_schema: Dict[str, Any]

    def descriptor(self) -> Dict[str, Any]:
        return {'name': self.name.value, 'description': self.description, 'inputSchema': self.input_schema}


TOOLS: Mapping[str, ToolDefinition] = MappingProxyType({
    tool.name.value: tool for tool in (
        ToolDefinition(
            name=ToolName.CREATE_PIPELINE,
            description='Create a production-ready CI/CD pipeline',
            prompt=PromptName.CREATE_PIPELINE,
            arguments=CreatePipelineArgs,
            input_schema={
                'type': 'object',
                'properties': {
                    'platform': {
                        'type': 'string',
                        'description': 'CI/CD platform (github-actions, gitlab-ci, jenkins, azure-devops)',
                        'enum': ['github-actions', 'gitlab-ci', 'jenkins', 'azure-devops'],
                    },
                    'language': {
                        'type': 'string',
                        'description': 'Programming language (auto-detected if not specified)',
                    },
                    'deployment_target': {
                        'type': 'string',
                        'description': 'Deployment target (kubernetes, docker, serverless, vm)',
                    },
                },
                'required': ['platform'],
            },
        ),
        ToolDefinition(
            name=ToolName.SECURITY_SCAN,
            description='Run comprehensive security scan with compliance mapping',
            prompt=PromptName.SECURITY_AUDIT,
            arguments=SecurityScanArgs,
            input_schema={
                'type': 'object',
                'properties': {
                    'scan_type': {
                        'type': 'string',
                        'description': 'Type of security scan',
                        'enum': ['full', 'secrets', 'vulnerabilities', 'compliance'],
                    },
                    'compliance_framework': {
                        'type': 'string',
                        'description': 'Compliance framework to map findings against',
                        'enum': ['soc2', 'hipaa', 'pci-dss', 'iso27001'],
                    },
                },
                'required': ['scan_type'],
            },
        ),
        ToolDefinition(
            name=ToolName.DORA_METRICS,
            description='Generate DORA metrics report with recommendations',
            prompt=PromptName.DORA_REPORT,
            arguments=DoraMetricsArgs,
            input_schema={
                'type': 'object',
                'properties': {
                    'period_days': {
                        'type': 'number',
                        'description': 'Analysis period in days (default: 90)',
                        'default': 90,
                    },
                },
            },
        ),
    )
})


def list_prompts() -> List[Dict[str, str]]:
    return [entry.summary() for entry in PROMPTS.values()]


def list_tools() -> List[Dict[str, Any]]:
    return [tool.descriptor() for tool in TOOLS.values()]


def get_prompt(name: Any) -> CatalogEntry:
    entry = PROMPTS.get(name) if isinstance(name, str) else None
    if entry is None:
        raise PromptNotFound(name)
    return entry


def get_tool(name: Any) -> ToolDefinition:
    tool = TOOLS.get(name) if isinstance(name, str) else None
    if tool is None:
        raise ToolNotFound(name)
    return tool


def parse_arguments(tool: ToolDefinition, arguments: Optional[Mapping[str, Any]]) -> BaseModel:
    """Validate a raw argument bag against the tool's parameter record.

    ``None`` values and empty strings are treated as absent so the record's
    defaults apply.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise InvalidArguments(f'Invalid arguments for {tool.name.value}: expected an object')
    cleaned = {k: v for k, v in arguments.items() if v is not None and v != ''}
    try:
        return tool.arguments.model_validate(cleaned)
    except ValidationError as e:
        problems = '; '.join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}" for err in e.errors()
        )
        raise InvalidArguments(f'Invalid arguments for {tool.name.value}: {problems}') from e


def call_tool(name: Any, arguments: Optional[Mapping[str, Any]] = None) -> str:
    """Return the composite text for a tool call: configuration header plus prompt body."""
    tool = get_tool(name)
    args = parse_arguments(tool, arguments)
    return args.render(PROMPTS[tool.prompt.value].body)


__all__ = [
    'PromptName', 'ToolName', 'CatalogEntry', 'ToolDefinition', 'PROMPTS', 'TOOLS',
    'CreatePipelineArgs', 'SecurityScanArgs', 'DoraMetricsArgs',
    'list_prompts', 'list_tools', 'get_prompt', 'get_tool', 'parse_arguments', 'call_tool',
]
