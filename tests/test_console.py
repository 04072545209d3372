import io

from rich.console import Console

from netsweep.console import _host_tree, by_severity, risk_label
from netsweep.models import Severity

from tests.helpers import finding, make_host


def render(renderable) -> str:
    out = Console(file=io.StringIO(), width=120, color_system=None)
    out.print(renderable)
    return out.file.getvalue()


def test_findings_ordered_most_severe_first():
    findings = [
        finding(Severity.LOW, 'a'),
        finding(Severity.CRITICAL, 'b'),
        finding(Severity.MEDIUM, 'c'),
        finding(Severity.CRITICAL, 'd'),
        finding(Severity.HIGH, 'e'),
    ]
    assert [f.type for f in by_severity(findings)] == ['b', 'd', 'e', 'c', 'a']


def test_host_tree_lists_severity_counts_and_order():
    host = make_host('10.0.0.2', ports=[23, 80], findings=[
        finding(Severity.LOW, 'Unencrypted Web Service', 80),
        finding(Severity.CRITICAL, 'Unencrypted Remote Access', 23),
        finding(Severity.LOW, 'Information Disclosure', 80),
    ])

    text = render(_host_tree(1, host, verbose=False))

    assert 'Vulnerabilities: 3 (1 critical, 2 low)' in text
    assert text.index('Unencrypted Remote Access') < text.index('Unencrypted Web Service')
    assert '23/tcp' in text


def test_host_without_findings():
    text = render(_host_tree(1, make_host('10.0.0.9'), verbose=True))
    assert 'none detected' in text


def test_risk_label_text():
    assert risk_label(85).plain == 'CRITICAL'
    assert risk_label(0).plain == 'MINIMAL'
