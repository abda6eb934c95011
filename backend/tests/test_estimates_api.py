import unittest

from api_support import ApiTestCase, estimate_payload


class EstimatesApiTests(ApiTestCase):
    def test_create_returns_number_and_totals(self):
        resp = self.client.post(
            "/api/v1/estimates",
            json=estimate_payload(parts_discount=10, payments=[{"amount": 100, "method": "CARD"}]),
        )
        self.assertEqual(resp.status_code, 201)
        estimate = resp.json()["estimate"]
        self.assertEqual(estimate["estimate_number"], "EST-00001")
        self.assertEqual(estimate["status"], "COMPLETED")
        totals = estimate["totals"]
        self.assertEqual(totals["parts_subtotal"], 200.0)
        self.assertEqual(totals["parts_discount_amount"], 20.0)
        self.assertEqual(totals["labor_subtotal"], 150.0)
        self.assertEqual(totals["total"], 330.0)
        self.assertEqual(totals["total_paid"], 100.0)
        self.assertEqual(totals["balance_due"], 230.0)

    def test_missing_discounts_are_stored_as_null(self):
        estimate = self.create_estimate()
        self.assertIsNone(estimate["parts_discount"])
        self.assertIsNone(estimate["labor_discount"])
        self.assertEqual(estimate["totals"]["total"], 350.0)
        self.assertEqual(estimate["totals"]["balance_due"], 350.0)

    def test_get_and_list(self):
        first = self.create_estimate(phone="0722")
        self.create_estimate(phone="0733", status="DRAFT")

        resp = self.client.get(f"/api/v1/estimates/{first['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["estimate"]["customer_phone"], "0722")

        all_resp = self.client.get("/api/v1/estimates")
        self.assertEqual(len(all_resp.json()["estimates"]), 2)

        drafts = self.client.get("/api/v1/estimates", params={"status": "DRAFT"}).json()["estimates"]
        self.assertEqual([e["customer_phone"] for e in drafts], ["0733"])

        by_phone = self.client.get("/api/v1/estimates", params={"customer_phone": "0722"}).json()["estimates"]
        self.assertEqual([e["id"] for e in by_phone], [first["id"]])

    def test_unknown_estimate_returns_404(self):
        resp = self.client.get("/api/v1/estimates/999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"]["error"]["code"], "NOT_FOUND")

    def test_payments_reduce_balance(self):
        estimate = self.create_estimate(status="AWAITING_PAYMENT")

        resp = self.client.post(f"/api/v1/estimates/{estimate['id']}/payments", json={"amount": 150})
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post(
            f"/api/v1/estimates/{estimate['id']}/payments",
            json={"amount": 50, "method": "TRANSFER", "date": "2025-03-01"},
        )
        updated = resp.json()["estimate"]

        self.assertEqual(len(updated["payments"]), 2)
        self.assertEqual(updated["payments"][1]["date"], "2025-03-01")
        self.assertEqual(updated["totals"]["total_paid"], 200.0)
        self.assertEqual(updated["totals"]["balance_due"], 150.0)

    def test_payment_on_draft_is_rejected(self):
        estimate = self.create_estimate(status="DRAFT")

        resp = self.client.post(f"/api/v1/estimates/{estimate['id']}/payments", json={"amount": 10})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["detail"]["error"]["code"], "INVALID_STATE")

    def test_status_update(self):
        estimate = self.create_estimate(status="DRAFT")

        resp = self.client.patch(f"/api/v1/estimates/{estimate['id']}/status", json={"status": "COMPLETED"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["estimate"]["status"], "COMPLETED")

    def test_invalid_payloads_return_400(self):
        cases = [
            estimate_payload(name="   "),
            estimate_payload(parts_discount=150),
            estimate_payload(parts=[{"price": 10, "quantity": 0}]),
            estimate_payload(status="ARCHIVED"),
        ]
        for payload in cases:
            resp = self.client.post("/api/v1/estimates", json=payload)
            self.assertEqual(resp.status_code, 400, payload)
            self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")

        estimate = self.create_estimate(status="AWAITING_PAYMENT")
        resp = self.client.post(f"/api/v1/estimates/{estimate['id']}/payments", json={"amount": 0})
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
