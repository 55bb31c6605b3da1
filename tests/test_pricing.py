from decimal import Decimal

from bizhub.services.pricing import compute_line, delivery_cost_for, summarize


class TestComputeLine:
    def test_vat_is_percentage_of_line_subtotal(self):
        line = compute_line(3, Decimal("10"), Decimal("10"))
        assert line.line_subtotal == Decimal("30.00")
        assert line.vat_amount == Decimal("3.00")
        assert line.line_total == Decimal("33.00")

    def test_vat_rounds_half_up_to_cents(self):
        # 1 x 0.05 at 10% = 0.005
        line = compute_line(1, Decimal("0.05"), Decimal("10"))
        assert line.vat_amount == Decimal("0.01")

    def test_zero_vat(self):
        line = compute_line(2, "5.50", 0)
        assert line.vat_amount == Decimal("0.00")
        assert line.line_total == Decimal("11.00")


class TestSummarize:
    def test_mixed_order_below_threshold_pays_delivery(self):
        price = summarize([
            compute_line(3, Decimal("10"), Decimal("10")),
            compute_line(1, Decimal("5"), Decimal("0")),
        ])
        assert price.subtotal == Decimal("35.00")
        assert price.total_vat == Decimal("3.00")
        assert price.delivery_cost == Decimal("2.00")
        assert price.grand_total == Decimal("40.00")

    def test_threshold_reached_delivers_free(self):
        price = summarize([compute_line(5, Decimal("10"), Decimal("0"))])
        assert price.subtotal == Decimal("50.00")
        assert price.delivery_cost == Decimal("0.00")
        assert price.grand_total == Decimal("50.00")

    def test_vat_is_rounded_once_on_the_order(self):
        # three lines of 0.005 VAT each: 0.015 rounds to 0.02, not 3 x 0.01
        price = summarize([compute_line(1, Decimal("0.05"), Decimal("10")) for _ in range(3)])
        assert [line.vat_amount for line in price.lines] == [Decimal("0.01")] * 3
        assert price.total_vat == Decimal("0.02")
        assert price.grand_total == price.subtotal + price.delivery_cost + Decimal("0.02")

    def test_grand_total_is_sum_of_parts(self):
        price = summarize([
            compute_line(7, Decimal("3.33"), Decimal("5")),
            compute_line(2, Decimal("0.99"), Decimal("10")),
        ])
        assert price.grand_total == price.subtotal + price.delivery_cost + price.total_vat


class TestDeliveryCost:
    def test_custom_threshold_and_flat_cost(self):
        assert delivery_cost_for(Decimal("99.99"), Decimal("100"), Decimal("7")) == Decimal("7.00")
        assert delivery_cost_for(Decimal("100"), Decimal("100"), Decimal("7")) == Decimal("0.00")
