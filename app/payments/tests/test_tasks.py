"""
Tests for payments Celery tasks.

Tasks are called synchronously; Stripe is replaced by a MagicMock
adapter or the provisioning service is patched out.
"""

from unittest.mock import MagicMock, patch

from payments.adapters import CustomerResult, DeletedResult, StripeAdapter
from payments.exceptions import (
    GatewayInvalidRequestError,
    GatewayNetworkError,
    GatewayRateLimitError,
)
from payments.models import PaymentAccount
from payments.services import ProvisioningSummary
from payments.tasks import (
    MAX_CLEANUP_RETRIES,
    delete_gateway_customers,
    provision_gateway_customers,
)
from payments.tests.factories import PaymentAccountFactory


class TestTaskConfiguration:
    """Both tasks are registered Celery shared tasks."""

    def test_tasks_are_registered(self):
        assert provision_gateway_customers.name == "payments.tasks.provision_gateway_customers"
        assert delete_gateway_customers.name == "payments.tasks.delete_gateway_customers"
        assert hasattr(provision_gateway_customers, "delay")
        assert delete_gateway_customers.acks_late is True

    def test_cleanup_retries_transient_errors_only(self):
        assert set(delete_gateway_customers.autoretry_for) == {
            GatewayNetworkError,
            GatewayRateLimitError,
        }
        assert GatewayInvalidRequestError not in delete_gateway_customers.autoretry_for
        assert delete_gateway_customers.retry_kwargs == {"max_retries": MAX_CLEANUP_RETRIES}


class TestProvisionGatewayCustomers:
    def test_returns_summary_dict(self):
        summary = ProvisioningSummary(created=2, skipped=1, failed=1, failures={"u": "X"})
        with patch("payments.services.AccountLinker") as linker_cls:
            linker_cls.return_value.provision_customers.return_value = summary

            result = provision_gateway_customers(page_size=50)

        linker_cls.return_value.provision_customers.assert_called_once_with(page_size=50)
        assert result == {"created": 2, "skipped": 1, "failed": 1, "failures": {"u": "X"}}


class TestDeleteGatewayCustomers:
    def _gateway(self, customer_ids):
        gateway = MagicMock(spec=StripeAdapter)
        gateway.list_customers.return_value = [CustomerResult(id=cid) for cid in customer_ids]
        gateway.delete_customer.side_effect = lambda cid: DeletedResult(id=cid, deleted=True)
        return gateway

    def test_deletes_listed_customers(self):
        gateway = self._gateway(["cus_1", "cus_2"])
        with patch("payments.adapters.StripeAdapter", return_value=gateway):
            result = delete_gateway_customers(limit=2)

        gateway.list_customers.assert_called_once_with(limit=2)
        assert [c.args[0] for c in gateway.delete_customer.call_args_list] == ["cus_1", "cus_2"]
        assert result == {"deleted": 2, "failed": 0}

    def test_one_failure_does_not_stop_cleanup(self):
        gateway = self._gateway(["cus_1", "cus_2", "cus_3"])

        def delete(cid):
            if cid == "cus_2":
                raise GatewayInvalidRequestError("No such customer")
            return DeletedResult(id=cid, deleted=True)

        gateway.delete_customer.side_effect = delete
        with patch("payments.adapters.StripeAdapter", return_value=gateway):
            result = delete_gateway_customers()

        assert result == {"deleted": 2, "failed": 1}

    def test_local_rows_untouched(self, db):
        PaymentAccountFactory(account={"id": "cus_1", "object": "customer"})
        gateway = self._gateway(["cus_1"])

        with patch("payments.adapters.StripeAdapter", return_value=gateway):
            delete_gateway_customers()

        assert PaymentAccount.objects.filter(external_id="cus_1").exists()
