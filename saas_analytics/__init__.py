"""SaaS Identity Analytics.

Correlates per-platform user records (Google Workspace, GitHub, Slack,
Zoom, AWS, Azure, Office 365) into cross-platform identities and scores
them for ghost accounts, security risk, and license waste.
"""

__version__ = "0.1.0"
__author__ = "Platform Analytics Team"
