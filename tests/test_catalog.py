"""Catalog and tool formatting tests.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.
"""
import pytest

from opsera_agent import catalog
from opsera_agent.errors import InvalidArguments, PromptNotFound, ToolNotFound


def test_prompt_ids_fixed():
    assert list(catalog.PROMPTS) == ['create-pipeline', 'security-audit', 'k8s-deploy', 'dora-report']
    assert [p.value for p in catalog.PromptName] == list(catalog.PROMPTS)


def test_tool_bindings():
    bound = {name: tool.prompt.value for name, tool in catalog.TOOLS.items()}
    assert bound == {
        'opsera_create_pipeline': 'create-pipeline',
        'opsera_security_scan': 'security-audit',
        'opsera_dora_metrics': 'dora-report',
    }


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        catalog.PROMPTS['extra'] = None
    entry = catalog.get_prompt('dora-report')
    with pytest.raises(AttributeError):
        entry.body = 'changed'


def test_bodies_trimmed():
    for entry in catalog.PROMPTS.values():
        assert entry.body == entry.body.strip()
        assert entry.body.startswith('# ')


def test_tool_descriptors_shape():
    tools = catalog.list_tools()
    assert [t['name'] for t in tools] == list(catalog.TOOLS)
    pipeline = tools[0]
    assert pipeline['inputSchema']['required'] == ['platform']
    assert 'gitlab-ci' in pipeline['inputSchema']['properties']['platform']['enum']


def test_unknown_prompt():
    with pytest.raises(PromptNotFound) as exc:
        catalog.get_prompt('nope')
    assert exc.value.message == 'Prompt not found: nope'


def test_prompt_lookup_case_sensitive():
    with pytest.raises(PromptNotFound):
        catalog.get_prompt('DORA-REPORT')


def test_unknown_tool_checked_before_arguments():
    with pytest.raises(ToolNotFound) as exc:
        catalog.call_tool('unknown_tool', 'not-a-dict')
    assert exc.value.message == 'Unknown tool: unknown_tool'


def test_create_pipeline_text():
    text = catalog.call_tool('opsera_create_pipeline', {'platform': 'gitlab-ci'})
    assert '**Platform**: gitlab-ci' in text
    assert '**Language**: auto-detect' in text
    assert '**Deployment Target**: kubernetes' in text
    assert catalog.PROMPTS['create-pipeline'].body in text
    assert text.endswith('generate a production-ready gitlab-ci pipeline.')


def test_create_pipeline_defaults():
    text = catalog.call_tool('opsera_create_pipeline')
    assert '**Platform**: github-actions' in text


def test_null_arguments_use_defaults():
    text = catalog.call_tool('opsera_create_pipeline', {'platform': None, 'language': 'go'})
    assert '**Platform**: github-actions' in text
    assert '**Language**: go' in text


def test_empty_strings_use_defaults():
    text = catalog.call_tool('opsera_create_pipeline', {'platform': '', 'language': '', 'deployment_target': ''})
    assert '- **Platform**: github-actions\n' in text
    assert '- **Language**: auto-detect\n' in text
    assert '- **Deployment Target**: kubernetes\n' in text
    assert '**Compliance Framework**: None specified' in catalog.call_tool(
        'opsera_security_scan', {'scan_type': 'full', 'compliance_framework': ''})


def test_security_scan_text():
    text = catalog.call_tool('opsera_security_scan', {'scan_type': 'secrets'})
    assert '**Scan Type**: secrets' in text
    assert '**Compliance Framework**: None specified' in text
    text = catalog.call_tool('opsera_security_scan', {'scan_type': 'full', 'compliance_framework': 'soc2'})
    assert '**Compliance Framework**: soc2' in text
    assert catalog.PROMPTS['security-audit'].body in text


def test_dora_metrics_text():
    text = catalog.call_tool('opsera_dora_metrics', {'period_days': 30})
    assert text.startswith('# DORA Metrics Analysis')
    assert '**Analysis Period**: 30 days' in text
    assert text.endswith(catalog.PROMPTS['dora-report'].body)
    assert '**Analysis Period**: 90 days' in catalog.call_tool('opsera_dora_metrics', {})


@pytest.mark.parametrize('name,arguments', [
    ('opsera_create_pipeline', {'platform': 'circleci'}),
    ('opsera_create_pipeline', {'platfrom': 'jenkins'}),
    ('opsera_security_scan', {'compliance_framework': 'gdpr'}),
    ('opsera_dora_metrics', {'period_days': -5}),
    ('opsera_dora_metrics', {'period_days': 'lots'}),
    ('opsera_dora_metrics', ['period_days']),
])
def test_bad_arguments_rejected(name, arguments):
    with pytest.raises(InvalidArguments) as exc:
        catalog.call_tool(name, arguments)
    assert exc.value.status_code == 400
    assert name in exc.value.message
