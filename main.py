'''
Orchestrator

Single responsibility: glue the reporting session together.

Responsibilities:
- Parse CLI arguments
- Configure the report plugin from a YAML config and CLI flags
- Replay executed rule results into the session
- Render the matching rule documents

This file contains no business logic.

'''
import argparse
import logging
import sys

from ADOC.Ingest.feed_loader import load_feed
from ADOC.Reporting.report_context import ReportContext
from ADOC.Results.rules import RuleKind
from ADOC.Session.config import (
	PROPERTY_DIRECTORY,
	PROPERTY_FILE_EXCLUDE,
	PROPERTY_FILE_INCLUDE,
	PROPERTY_RULE_DIRECTORY,
	ReportConfigLoader,
)
from ADOC.Session.report_plugin import DocumentReportPlugin
from ADOC.errors import ReportingError

logger = logging.getLogger("adoc")


def parse_args(argv=None):
	p = argparse.ArgumentParser(description="Render rule documents enriched with rule results")
	p.add_argument("results", help="Rule result feed (YAML)")
	p.add_argument("--outdir", "-o", default="report", help="Report output root")
	p.add_argument("--config", "-c", help="Report properties (YAML)")
	p.add_argument("--rules", "-r", help="Rule directory to scan for documents")
	p.add_argument("--report-dir", help="Directory for the HTML files")
	p.add_argument("--include", help="Comma-separated document include patterns")
	p.add_argument("--exclude", help="Comma-separated document exclude patterns")
	p.add_argument("--verbose", "-v", action="store_true")
	return p.parse_args(argv)


def build_properties(args):
	properties = ReportConfigLoader(args.config).properties if args.config else {}
	overrides = {
		PROPERTY_DIRECTORY: args.report_dir,
		PROPERTY_RULE_DIRECTORY: args.rules,
		PROPERTY_FILE_INCLUDE: args.include,
		PROPERTY_FILE_EXCLUDE: args.exclude,
	}
	properties.update({key: value for key, value in overrides.items() if value})
	return properties


def main(argv=None):
	args = parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.INFO,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)

	try:
		entries = load_feed(args.results)
		report_context = ReportContext(args.outdir)
		plugin = DocumentReportPlugin()
		plugin.configure(report_context, build_properties(args))

		plugin.begin()
		for entry in entries:
			rule = entry.rule
			if rule.kind is RuleKind.CONCEPT:
				plugin.begin_concept(rule)
			elif rule.kind is RuleKind.CONSTRAINT:
				plugin.begin_constraint(rule)
			else:
				plugin.begin_group(rule)
			for report in entry.reports:
				report_context.add_report(rule, report)
			plugin.set_result(entry.result)
		written = plugin.end()
	except (ReportingError, FileNotFoundError, ValueError) as e:
		logger.error("Report failed: %s", e)
		return 1

	for path in written:
		print(path)
	return 0


if __name__ == "__main__":
	sys.exit(main())
