#!/usr/bin/env python3
"""
Provider tests for Cloud DNS Manager

The boto3 client and the requests session are replaced with mocks so the
wire payloads each provider sends can be checked without network access.
"""

import unittest
from unittest.mock import Mock

from botocore.exceptions import ClientError

from clouddns.exceptions import ProviderApiError, ZoneNotFoundError
from clouddns.models import ZoneHandle
from clouddns.providers.cloudflare_provider import create_cloudflare_provider
from clouddns.providers.digitalocean_provider import create_digitalocean_provider
from clouddns.providers.route53_provider import (
    clean_zone_id,
    create_route53_provider,
    looks_like_zone_id,
)

ZONE_ID = "Z1D633PJN98FT9"
CF_ZONE_ID = "023e105f4ecef8ad9ca31a8372d0c353"


def client_error(code, message, operation="ChangeResourceRecordSets"):
    return ClientError(
        {"Error": {"Code": code, "Message": message}, "ResponseMetadata": {"HTTPStatusCode": 400}},
        operation,
    )


def http_response(body=None, status=200):
    response = Mock()
    response.status_code = status
    response.reason = "OK" if status < 400 else "Error"
    response.content = b"" if body is None else b"{}"
    response.json.return_value = body
    return response


def mock_session(*responses):
    session = Mock()
    session.headers = {}
    session.request.side_effect = list(responses)
    return session


def sent(session, index):
    """Return (method, url, params, json) of the index-th request."""
    call = session.request.call_args_list[index]
    return call.args[0], call.args[1], call.kwargs.get("params"), call.kwargs.get("json")


def route53_store(client):
    """Back a mocked Route53 client with an in-memory dict of record sets."""
    record_sets = {}

    def change_resource_record_sets(HostedZoneId, ChangeBatch):
        for change in ChangeBatch["Changes"]:
            record_set = change["ResourceRecordSet"]
            key = (record_set["Name"].lower(), record_set["Type"])
            if change["Action"] == "DELETE":
                record_sets.pop(key, None)
            else:
                record_sets[key] = record_set
        return {"ChangeInfo": {"Id": f"/change/C{len(record_sets)}", "Status": "PENDING"}}

    def list_resource_record_sets(HostedZoneId, StartRecordName=None, StartRecordType=None, MaxItems=None):
        keys = sorted(record_sets)
        if StartRecordName:
            keys = [key for key in keys if key >= (StartRecordName.lower(), StartRecordType)]
        if MaxItems:
            keys = keys[: int(MaxItems)]
        return {"ResourceRecordSets": [record_sets[key] for key in keys], "IsTruncated": False}

    client.change_resource_record_sets.side_effect = change_resource_record_sets
    client.list_resource_record_sets.side_effect = list_resource_record_sets
    return record_sets


def rest_store(session, list_key, item_key, paged_by_links=False):
    """Back a mocked requests session with an in-memory list of records."""
    records = []

    def request(method, url, params=None, json=None, timeout=None):
        if method == "POST":
            record = dict(json, id=str(len(records) + 1))
            records.append(record)
            return http_response({"success": True, item_key: record}, 201)
        if method == "PUT":
            record_id = url.rsplit("/", 1)[-1]
            for index, record in enumerate(records):
                if record["id"] == record_id:
                    records[index] = dict(json, id=record_id)
            return http_response({"success": True, item_key: dict(json, id=record_id)})

        params = params or {}
        matches = [
            record
            for record in records
            if params.get("type", record["type"]) == record["type"]
            and (paged_by_links or params.get("name", record["name"]) == record["name"])
        ]
        body = {"success": True, list_key: matches}
        body.update({"links": {}} if paged_by_links else {"result_info": {"total_pages": 1}})
        return http_response(body)

    session.request.side_effect = request
    return records


class TestRoute53ZoneResolver(unittest.TestCase):
    """Test hosted zone lookup."""

    def setUp(self):
        self.client = Mock()
        self.provider = create_route53_provider({}, client=self.client)

    def test_zone_id_helpers(self):
        self.assertEqual(clean_zone_id(f"/hostedzone/{ZONE_ID}"), ZONE_ID)
        self.assertTrue(looks_like_zone_id(f"/hostedzone/{ZONE_ID}"))
        self.assertFalse(looks_like_zone_id("example.com"))

    def test_resolve_zone_id_skips_listing(self):
        self.client.get_hosted_zone.return_value = {
            "HostedZone": {"Id": f"/hostedzone/{ZONE_ID}", "Name": "example.com."}
        }

        handle = self.provider.zones.resolve(f"/hostedzone/{ZONE_ID}")
        self.provider.zones.resolve(ZONE_ID)

        self.assertEqual(handle, ZoneHandle(id=ZONE_ID, name="example.com"))
        self.client.get_hosted_zone.assert_called_once_with(Id=ZONE_ID)
        self.client.list_hosted_zones.assert_not_called()

    def test_resolve_domain_across_pages(self):
        self.client.list_hosted_zones.side_effect = [
            {
                "HostedZones": [{"Id": "/hostedzone/ZAAAAAAAAAAAAA", "Name": "example.org."}],
                "IsTruncated": True,
                "NextMarker": "page-2",
            },
            {
                "HostedZones": [{"Id": f"/hostedzone/{ZONE_ID}", "Name": "example.com."}],
                "IsTruncated": False,
            },
        ]

        handle = self.provider.zones.resolve("Example.com.")

        self.assertEqual(handle.id, ZONE_ID)
        self.assertEqual(self.client.list_hosted_zones.call_args_list[1].kwargs, {"Marker": "page-2"})

    def test_resolve_missing_zone_id(self):
        self.client.get_hosted_zone.side_effect = client_error(
            "NoSuchHostedZone", "No hosted zone found", "GetHostedZone"
        )
        with self.assertRaises(ZoneNotFoundError):
            self.provider.zones.resolve(ZONE_ID)

    def test_resolve_unknown_domain(self):
        self.client.list_hosted_zones.return_value = {"HostedZones": [], "IsTruncated": False}
        with self.assertRaises(ZoneNotFoundError):
            self.provider.zones.resolve("missing.com")

    def test_api_errors_are_wrapped(self):
        self.client.list_hosted_zones.side_effect = client_error(
            "AccessDenied", "User is not authorized", "ListHostedZones"
        )
        with self.assertRaises(ProviderApiError) as context:
            self.provider.zones.list_zones()
        self.assertIn("User is not authorized", str(context.exception))


class TestRoute53RecordService(unittest.TestCase):
    """Test Route53 record operations."""

    def setUp(self):
        self.client = Mock()
        self.client.change_resource_record_sets.return_value = {
            "ChangeInfo": {"Id": "/change/C2682N5HXP0BZ4", "Status": "PENDING"}
        }
        self.service = create_route53_provider({}, client=self.client).records
        self.zone = ZoneHandle(id=ZONE_ID, name="example.com")

    def change(self, index=0):
        call = self.client.change_resource_record_sets.call_args_list[index]
        return call.kwargs["ChangeBatch"]["Changes"][0]

    def test_list_records_paginates_and_skips_soa(self):
        self.client.list_resource_record_sets.side_effect = [
            {
                "ResourceRecordSets": [
                    {"Name": "example.com.", "Type": "SOA", "TTL": 900,
                     "ResourceRecords": [{"Value": "ns-1.awsdns-00.com. hostmaster. 1 7200 900 1209600 86400"}]},
                    {"Name": "example.com.", "Type": "MX", "TTL": 300,
                     "ResourceRecords": [{"Value": "10 mail1.example.com."}, {"Value": "20 mail2.example.com."}]},
                ],
                "IsTruncated": True,
                "NextRecordName": "www.example.com.",
                "NextRecordType": "A",
            },
            {
                "ResourceRecordSets": [
                    {"Name": "www.example.com.", "Type": "A",
                     "AliasTarget": {"DNSName": "d123.cloudfront.net.", "HostedZoneId": "Z2FDTNDATAQYW2",
                                     "EvaluateTargetHealth": False}},
                    {"Name": "\\052.example.com.", "Type": "TXT", "TTL": 60,
                     "ResourceRecords": [{"Value": '"hello world"'}]},
                ],
                "IsTruncated": False,
            },
        ]

        records = self.service.list_records(self.zone)

        self.assertEqual([r.type for r in records], ["MX", "MX", "A", "TXT"])
        self.assertEqual(records[1].value, "20 mail2.example.com")
        self.assertEqual(records[2].value, "ALIAS: d123.cloudfront.net.")
        self.assertEqual(records[2].ttl, 0)
        self.assertEqual(records[3].name, "*.example.com")
        self.assertEqual(records[3].value, "hello world")

        second_call = self.client.list_resource_record_sets.call_args_list[1].kwargs
        self.assertEqual(second_call["StartRecordName"], "www.example.com.")
        self.assertEqual(second_call["StartRecordType"], "A")

    def test_find_record_uses_start_name(self):
        self.client.list_resource_record_sets.return_value = {
            "ResourceRecordSets": [
                {"Name": "www.example.com.", "Type": "A", "TTL": 300,
                 "ResourceRecords": [{"Value": "192.0.2.1"}]}
            ]
        }

        record = self.service.find_record(self.zone, "a", "www")

        self.assertEqual(record.value, "192.0.2.1")
        self.client.list_resource_record_sets.assert_called_once_with(
            HostedZoneId=ZONE_ID,
            StartRecordName="www.example.com.",
            StartRecordType="A",
            MaxItems="1",
        )

    def test_find_record_ignores_next_record(self):
        self.client.list_resource_record_sets.return_value = {
            "ResourceRecordSets": [
                {"Name": "zzz.example.com.", "Type": "A", "TTL": 300,
                 "ResourceRecords": [{"Value": "192.0.2.9"}]}
            ]
        }
        self.assertIsNone(self.service.find_record(self.zone, "A", "www"))

    def test_set_record_created_then_updated(self):
        """The first upsert creates the record, the second reports an update."""
        existing = {
            "ResourceRecordSets": [
                {"Name": "example.com.", "Type": "TXT", "TTL": 300,
                 "ResourceRecords": [{"Value": '"v=spf1 -all"'}]}
            ]
        }
        self.client.list_resource_record_sets.side_effect = [{"ResourceRecordSets": []}, existing]

        first = self.service.set_record(self.zone, "TXT", "@", "v=spf1 -all", 300)
        second = self.service.set_record(self.zone, "TXT", "@", "v=spf1 -all", 300)

        self.assertEqual(first.action, "created")
        self.assertEqual(second.action, "updated")
        self.assertEqual(first.id, "C2682N5HXP0BZ4")

        change = self.change()
        self.assertEqual(change["Action"], "UPSERT")
        self.assertEqual(
            change["ResourceRecordSet"],
            {
                "Name": "example.com.",
                "Type": "TXT",
                "TTL": 300,
                "ResourceRecords": [{"Value": '"v=spf1 -all"'}],
            },
        )

    def test_set_record_formats_values(self):
        self.client.list_resource_record_sets.return_value = {"ResourceRecordSets": []}
        cases = [
            ("CNAME", "target.example.com", None, "target.example.com."),
            ("MX", "mail.example.com", None, "10 mail.example.com."),
            ("MX", "mail.example.com", {"priority": 20}, "20 mail.example.com."),
            ("SRV", "10 5 5060 sip.example.com", None, "10 5 5060 sip.example.com."),
            ("SRV", "sip.example.com", {"priority": 10, "weight": 5, "port": 5060}, "10 5 5060 sip.example.com."),
            ("CAA", "letsencrypt.org", None, '0 issue "letsencrypt.org"'),
            ("CAA", "letsencrypt.org", {"tag": "issuewild"}, '0 issuewild "letsencrypt.org"'),
        ]
        for index, (record_type, value, extras, expected) in enumerate(cases):
            with self.subTest(record_type=record_type, value=value, extras=extras):
                self.service.set_record(self.zone, record_type, "www", value, extras=extras)
                resource = self.change(index)["ResourceRecordSet"]["ResourceRecords"][0]
                self.assertEqual(resource["Value"], expected)

    def test_encode_is_stable_after_decode(self):
        formatter = self.service.formatter
        cases = [
            ("A", "192.0.2.1"),
            ("TXT", "v=spf1 include:_spf.example.com ~all"),
            ("TXT", '"already quoted"'),
            ("CNAME", "target.example.com."),
            ("MX", "mail.example.com"),
            ("SRV", "10 5 5060 sip.example.com"),
            ("CAA", "letsencrypt.org"),
            ("PTR", "host.example.com"),
        ]
        for record_type, value in cases:
            with self.subTest(record_type=record_type, value=value):
                encoded = formatter.encode(record_type, value)
                self.assertEqual(formatter.encode(record_type, formatter.decode(record_type, encoded)), encoded)

    def test_set_then_find_returns_record(self):
        service = create_route53_provider({}, client=Mock()).records
        route53_store(service.client)

        service.set_record(self.zone, "TXT", "@", "v=spf1 -all", 300)
        service.set_record(
            self.zone, "SRV", "_sip._tcp", "sip.example.com", 600, {"priority": 10, "weight": 5, "port": 5060}
        )

        txt = service.find_record(self.zone, "TXT", "@")
        self.assertEqual((txt.name, txt.value, txt.ttl), ("example.com", "v=spf1 -all", 300))
        srv = service.find_record(self.zone, "SRV", "_sip._tcp")
        self.assertEqual(srv.value, "10 5 5060 sip.example.com")
        self.assertEqual(srv.ttl, 600)
        self.assertIsNone(service.find_record(self.zone, "TXT", "www"))

    def test_delete_record_replays_record_set(self):
        record_set = {"Name": "www.example.com.", "Type": "A", "TTL": 300,
                      "ResourceRecords": [{"Value": "192.0.2.1"}]}
        self.client.list_resource_record_sets.return_value = {"ResourceRecordSets": [record_set]}

        self.assertTrue(self.service.delete_record(self.zone, "A", "www"))

        change = self.change()
        self.assertEqual(change["Action"], "DELETE")
        self.assertEqual(change["ResourceRecordSet"], record_set)

    def test_delete_missing_record(self):
        self.client.list_resource_record_sets.return_value = {"ResourceRecordSets": []}

        self.assertFalse(self.service.delete_record(self.zone, "A", "www"))
        self.client.change_resource_record_sets.assert_not_called()

    def test_delete_record_already_gone(self):
        self.client.list_resource_record_sets.return_value = {
            "ResourceRecordSets": [
                {"Name": "www.example.com.", "Type": "A", "TTL": 300,
                 "ResourceRecords": [{"Value": "192.0.2.1"}]}
            ]
        }
        self.client.change_resource_record_sets.side_effect = client_error(
            "InvalidChangeBatch",
            "Tried to delete resource record set [name='www.example.com.', type='A'] but it was not found",
        )

        self.assertFalse(self.service.delete_record(self.zone, "A", "www"))

    def test_delete_record_other_errors_propagate(self):
        self.client.list_resource_record_sets.return_value = {
            "ResourceRecordSets": [
                {"Name": "www.example.com.", "Type": "A", "TTL": 300,
                 "ResourceRecords": [{"Value": "192.0.2.1"}]}
            ]
        }
        self.client.change_resource_record_sets.side_effect = client_error(
            "Throttling", "Rate exceeded"
        )

        with self.assertRaises(ProviderApiError):
            self.service.delete_record(self.zone, "A", "www")


class TestCloudflareProvider(unittest.TestCase):
    """Test Cloudflare zone and record operations."""

    zone = ZoneHandle(id=CF_ZONE_ID, name="example.com")

    def provider(self, *responses):
        self.session = mock_session(*responses)
        return create_cloudflare_provider({"api_token": "cf-token"}, session=self.session)

    def test_bearer_token_header(self):
        self.provider()
        self.assertEqual(self.session.headers["Authorization"], "Bearer cf-token")

    def test_resolve_zone_id(self):
        provider = self.provider(
            http_response({"success": True, "result": {"id": CF_ZONE_ID, "name": "example.com"}})
        )

        handle = provider.zones.resolve(CF_ZONE_ID)
        provider.zones.resolve("example.com")

        self.assertEqual(handle.name, "example.com")
        self.assertEqual(self.session.request.call_count, 1)
        self.assertTrue(sent(self.session, 0)[1].endswith(f"/zones/{CF_ZONE_ID}"))

    def test_resolve_zone_name(self):
        provider = self.provider(
            http_response({"success": True, "result": [{"id": CF_ZONE_ID, "name": "example.com"}]})
        )

        handle = provider.zones.resolve("example.com.")

        self.assertEqual(handle.id, CF_ZONE_ID)
        self.assertEqual(sent(self.session, 0)[2], {"name": "example.com"})

    def test_resolve_missing_zone(self):
        provider = self.provider(
            http_response(
                {"success": False, "errors": [{"code": 7003, "message": "Could not route"}]}, 404
            ),
            http_response({"success": True, "result": []}),
        )

        with self.assertRaises(ZoneNotFoundError):
            provider.zones.resolve(CF_ZONE_ID)
        with self.assertRaises(ZoneNotFoundError):
            provider.zones.resolve("missing.com")

    def test_list_zones_paginates(self):
        provider = self.provider(
            http_response({"success": True, "result": [{"id": "b" * 32, "name": "example.org"}],
                           "result_info": {"page": 1, "total_pages": 2}}),
            http_response({"success": True, "result": [{"id": CF_ZONE_ID, "name": "example.com"}],
                           "result_info": {"page": 2, "total_pages": 2}}),
        )

        zones = provider.zones.list_zones()

        self.assertEqual([z.name for z in zones], ["example.com", "example.org"])
        self.assertEqual(sent(self.session, 1)[2], {"per_page": 50, "page": 2})

    def test_errors_carry_codes(self):
        provider = self.provider(
            http_response({"success": False, "errors": [{"code": 10000, "message": "Authentication error"}]}, 403)
        )

        with self.assertRaises(ProviderApiError) as context:
            provider.zones.list_zones()
        self.assertEqual(context.exception.codes, (10000,))
        self.assertEqual(context.exception.status_code, 403)

    def test_set_txt_record_at_apex(self):
        provider = self.provider(
            http_response({"success": True, "result": [], "result_info": {"total_pages": 1}}),
            http_response({"success": True, "result": {"id": "rec-1"}}),
        )

        result = provider.records.set_record(self.zone, "TXT", "@", "v=spf1 -all", 1)

        self.assertEqual(result.action, "created")
        self.assertEqual(result.id, "rec-1")
        self.assertEqual(sent(self.session, 0)[2]["name"], "example.com")
        method, url, _, payload = sent(self.session, 1)
        self.assertEqual(method, "POST")
        self.assertTrue(url.endswith(f"/zones/{CF_ZONE_ID}/dns_records"))
        self.assertEqual(
            payload, {"type": "TXT", "name": "example.com", "ttl": 1, "content": '"v=spf1 -all"'}
        )

    def test_update_keeps_existing_proxied_flag(self):
        existing = {"id": "rec-9", "type": "A", "name": "www.example.com", "content": "192.0.2.1",
                    "ttl": 1, "proxied": True}
        provider = self.provider(
            http_response({"success": True, "result": [existing], "result_info": {"total_pages": 1}}),
            http_response({"success": True, "result": existing}),
        )

        result = provider.records.set_record(self.zone, "A", "www", "192.0.2.2")

        self.assertEqual(result.action, "updated")
        method, url, _, payload = sent(self.session, 1)
        self.assertEqual(method, "PUT")
        self.assertTrue(url.endswith("/dns_records/rec-9"))
        self.assertTrue(payload["proxied"])
        self.assertEqual(payload["content"], "192.0.2.2")

    def test_payload_fields_per_type(self):
        formatter = self.provider().records.formatter

        mx = formatter.build_payload("MX", "example.com", "20 mail.example.com", 300, {"proxied": True})
        self.assertEqual(mx["priority"], 20)
        self.assertEqual(mx["content"], "mail.example.com")
        self.assertNotIn("proxied", mx)

        cname = formatter.build_payload("CNAME", "www.example.com", "target.example.com.", 300)
        self.assertEqual(cname["content"], "target.example.com")
        self.assertFalse(cname["proxied"])

        caa = formatter.build_payload("CAA", "example.com", "letsencrypt.org", 300)
        self.assertEqual(caa["data"], {"flags": 0, "tag": "issue", "value": "letsencrypt.org"})
        self.assertNotIn("content", caa)

    def test_encode_is_stable_after_decode(self):
        formatter = self.provider().records.formatter
        cases = [
            ("A", "192.0.2.1"),
            ("TXT", "v=spf1 include:_spf.example.com ~all"),
            ("TXT", '"already quoted"'),
            ("CNAME", "target.example.com."),
            ("NS", "ns1.example.com"),
            ("MX", "10 mail.example.com."),
            ("CAA", '0 issue "letsencrypt.org"'),
        ]
        for record_type, value in cases:
            with self.subTest(record_type=record_type, value=value):
                encoded = formatter.encode(record_type, value)
                self.assertEqual(formatter.encode(record_type, formatter.decode(record_type, encoded)), encoded)

    def test_set_then_find_returns_record(self):
        provider = self.provider()
        rest_store(self.session, "result", "result")

        provider.records.set_record(self.zone, "TXT", "@", "v=spf1 -all", 1)
        provider.records.set_record(self.zone, "MX", "@", "mail.example.com", 300, {"priority": 20})
        provider.records.set_record(self.zone, "A", "www", "192.0.2.1", 300, {"proxied": True})

        txt = provider.records.find_record(self.zone, "TXT", "@")
        self.assertEqual((txt.name, txt.value, txt.ttl), ("example.com", "v=spf1 -all", 1))
        mx = provider.records.find_record(self.zone, "MX", "@")
        self.assertEqual((mx.value, mx.priority), ("mail.example.com", 20))
        a = provider.records.find_record(self.zone, "A", "www")
        self.assertEqual((a.name, a.value, a.proxied), ("www.example.com", "192.0.2.1", True))
        self.assertIsNone(provider.records.find_record(self.zone, "A", "api"))

    def test_list_records_decodes_values(self):
        provider = self.provider(
            http_response({"success": True, "result": [
                {"id": "1", "type": "TXT", "name": "example.com", "content": '"hello"', "ttl": 1},
                {"id": "2", "type": "MX", "name": "example.com", "content": "mail.example.com",
                 "priority": 10, "ttl": 3600},
                {"id": "3", "type": "SOA", "name": "example.com", "content": "ns.cloudflare.com", "ttl": 3600},
            ], "result_info": {"total_pages": 1}})
        )

        records = provider.records.list_records(self.zone)

        self.assertEqual([r.type for r in records], ["TXT", "MX"])
        self.assertEqual(records[0].value, "hello")
        self.assertEqual(records[1].priority, 10)

    def test_delete_record(self):
        record = {"id": "rec-9", "type": "A", "name": "www.example.com", "content": "192.0.2.1", "ttl": 1}
        provider = self.provider(
            http_response({"success": True, "result": [record], "result_info": {"total_pages": 1}}),
            http_response({"success": True, "result": {"id": "rec-9"}}),
        )

        self.assertTrue(provider.records.delete_record(self.zone, "A", "www"))
        method, url, _, _ = sent(self.session, 1)
        self.assertEqual(method, "DELETE")
        self.assertTrue(url.endswith("/dns_records/rec-9"))

    def test_delete_record_already_gone(self):
        record = {"id": "rec-9", "type": "A", "name": "www.example.com", "content": "192.0.2.1", "ttl": 1}
        provider = self.provider(
            http_response({"success": True, "result": [record], "result_info": {"total_pages": 1}}),
            http_response({"success": False, "errors": [{"code": 81044, "message": "Record does not exist."}]}, 404),
        )

        self.assertFalse(provider.records.delete_record(self.zone, "A", "www"))


class TestDigitalOceanProvider(unittest.TestCase):
    """Test DigitalOcean domain and record operations."""

    zone = ZoneHandle(id="example.com", name="example.com")

    def provider(self, *responses):
        self.session = mock_session(*responses)
        return create_digitalocean_provider({"api_token": "do-token"}, session=self.session)

    def test_resolve_domain(self):
        provider = self.provider(http_response({"domain": {"name": "example.com", "ttl": 1800}}))

        handle = provider.zones.resolve("Example.com.")

        self.assertEqual(handle, ZoneHandle(id="example.com", name="example.com"))
        self.assertTrue(sent(self.session, 0)[1].endswith("/domains/example.com"))

    def test_resolve_invalid_domain_skips_request(self):
        provider = self.provider()

        with self.assertRaises(ZoneNotFoundError):
            provider.zones.resolve("localhost")
        self.session.request.assert_not_called()

    def test_resolve_missing_domain(self):
        provider = self.provider(
            http_response({"id": "not_found", "message": "The resource you were accessing could not be found."}, 404)
        )
        with self.assertRaises(ZoneNotFoundError):
            provider.zones.resolve("missing.com")

    def test_list_zones_follows_next_link(self):
        next_page = "https://api.digitalocean.com/v2/domains?page=2&per_page=200"
        provider = self.provider(
            http_response({"domains": [{"name": "example.org"}], "links": {"pages": {"next": next_page}}}),
            http_response({"domains": [{"name": "example.com"}], "links": {}}),
        )

        zones = provider.zones.list_zones()

        self.assertEqual([z.name for z in zones], ["example.com", "example.org"])
        _, url, params, _ = sent(self.session, 1)
        self.assertEqual(url, next_page)
        self.assertIsNone(params)

    def test_set_cname_at_apex_passes_name_through(self):
        provider = self.provider(
            http_response({"domain_records": [], "links": {}}),
            http_response({"domain_record": {"id": 3352896, "type": "CNAME", "name": "@"}}),
        )

        result = provider.records.set_record(self.zone, "CNAME", "@", "target.example.com", 1800)

        self.assertEqual(result.action, "created")
        self.assertEqual(result.id, "3352896")
        method, _, _, payload = sent(self.session, 1)
        self.assertEqual(method, "POST")
        self.assertEqual(
            payload, {"type": "CNAME", "name": "@", "data": "target.example.com.", "ttl": 1800}
        )

    def test_set_record_updates_existing(self):
        existing = {"id": 28448429, "type": "A", "name": "www", "data": "192.0.2.1", "ttl": 1800}
        provider = self.provider(
            http_response({"domain_records": [existing], "links": {}}),
            http_response({"domain_record": existing}),
        )

        result = provider.records.set_record(self.zone, "A", "www", "192.0.2.2")

        self.assertEqual(result.action, "updated")
        self.assertEqual(result.id, "28448429")
        method, url, _, payload = sent(self.session, 1)
        self.assertEqual(method, "PUT")
        self.assertTrue(url.endswith("/domains/example.com/records/28448429"))
        self.assertEqual(payload["data"], "192.0.2.2")
        self.assertEqual(sent(self.session, 0)[2]["name"], "www.example.com")

    def test_payload_fields_per_type(self):
        formatter = self.provider().records.formatter

        mx = formatter.build_payload("MX", "@", "mail.example.com", 1800)
        self.assertEqual(mx["priority"], 10)
        self.assertEqual(mx["data"], "mail.example.com.")

        srv = formatter.build_payload("SRV", "_sip._tcp", "10 5 5060 sip.example.com", 1800)
        self.assertEqual(
            {k: srv[k] for k in ("priority", "weight", "port", "data")},
            {"priority": 10, "weight": 5, "port": 5060, "data": "sip.example.com."},
        )

        caa = formatter.build_payload("CAA", "@", "letsencrypt.org", 1800, {"tag": "issuewild"})
        self.assertEqual((caa["flags"], caa["tag"], caa["data"]), (0, "issuewild", "letsencrypt.org"))

        txt = formatter.build_payload("TXT", "@", '"v=spf1 -all"', 1800)
        self.assertEqual(txt["data"], "v=spf1 -all")

    def test_srv_target_with_separate_fields(self):
        formatter = self.provider().records.formatter

        srv = formatter.build_payload(
            "SRV", "_sip._tcp", "sip.example.com", 1800, {"priority": 10, "weight": 5, "port": 5060}
        )

        self.assertEqual(
            srv,
            {"type": "SRV", "name": "_sip._tcp", "data": "sip.example.com.", "ttl": 1800,
             "priority": 10, "weight": 5, "port": 5060},
        )

    def test_encode_is_stable_after_decode(self):
        formatter = self.provider().records.formatter
        cases = [
            ("A", "192.0.2.1"),
            ("TXT", '"v=spf1 -all"'),
            ("TXT", "plain text"),
            ("CNAME", "target.example.com"),
            ("CNAME", "@"),
            ("MX", "10 mail.example.com"),
            ("SRV", "10 5 5060 sip.example.com"),
            ("CAA", '0 issue "letsencrypt.org"'),
        ]
        for record_type, value in cases:
            with self.subTest(record_type=record_type, value=value):
                encoded = formatter.encode(record_type, value)
                self.assertEqual(formatter.encode(record_type, formatter.decode(record_type, encoded)), encoded)

    def test_set_then_find_returns_record(self):
        provider = self.provider()
        rest_store(self.session, "domain_records", "domain_record", paged_by_links=True)

        provider.records.set_record(
            self.zone, "SRV", "_sip._tcp", "sip.example.com", 1800, {"priority": 10, "weight": 5, "port": 5060}
        )
        provider.records.set_record(self.zone, "TXT", "@", "v=spf1 -all", 3600)

        srv = provider.records.find_record(self.zone, "SRV", "_sip._tcp")
        self.assertEqual(srv.value, "sip.example.com")
        self.assertEqual((srv.priority, srv.weight, srv.port), (10, 5, 5060))
        txt = provider.records.find_record(self.zone, "TXT", "@")
        self.assertEqual((txt.name, txt.value, txt.ttl), ("@", "v=spf1 -all", 3600))
        self.assertIsNone(provider.records.find_record(self.zone, "TXT", "www"))

    def test_list_records_follows_next_link(self):
        next_page = "https://api.digitalocean.com/v2/domains/example.com/records?page=2&per_page=200"
        provider = self.provider(
            http_response({
                "domain_records": [
                    {"id": 1, "type": "SOA", "name": "@", "data": "1800", "ttl": 1800},
                    {"id": 2, "type": "A", "name": "www", "data": "192.0.2.1", "ttl": 1800},
                ],
                "links": {"pages": {"next": next_page}},
            }),
            http_response({
                "domain_records": [{"id": 3, "type": "MX", "name": "@", "data": "mail.example.com.",
                                    "priority": 10, "ttl": 1800}],
                "links": {"pages": {"prev": "https://api.digitalocean.com/v2/domains/example.com/records?page=1"}},
            }),
        )

        records = provider.records.list_records(self.zone)

        self.assertEqual([(r.id, r.type) for r in records], [("2", "A"), ("3", "MX")])
        self.assertEqual(records[1].value, "mail.example.com")
        self.assertEqual(sent(self.session, 0)[2], {"per_page": 200})
        _, url, params, _ = sent(self.session, 1)
        self.assertEqual(url, next_page)
        self.assertIsNone(params)

    def test_delete_record_already_gone(self):
        record = {"id": 28448429, "type": "A", "name": "www", "data": "192.0.2.1", "ttl": 1800}
        provider = self.provider(
            http_response({"domain_records": [record], "links": {}}),
            http_response({"id": "not_found", "message": "The resource you were accessing could not be found."}, 404),
        )

        self.assertFalse(provider.records.delete_record(self.zone, "A", "www"))

    def test_delete_record(self):
        record = {"id": 28448429, "type": "A", "name": "www", "data": "192.0.2.1", "ttl": 1800}
        provider = self.provider(
            http_response({"domain_records": [record], "links": {}}),
            http_response(status=204),
        )

        self.assertTrue(provider.records.delete_record(self.zone, "A", "www"))
        self.assertEqual(sent(self.session, 1)[0], "DELETE")


if __name__ == "__main__":
    unittest.main(verbosity=2)
