"""analytics.js snippets for client-side tracking."""

import json

from shopsense.tracking.config import TrackingSettings
from shopsense.tracking.schema import EventProperties, ProductAction, ProductFieldObject, ProductImpression

_LOADER = (
    "(function(i,s,o,g,r,a,m){i['GoogleAnalyticsObject']=r;i[r]=i[r]||function(){\n"
    "(i[r].q=i[r].q||[]).push(arguments)},i[r].l=1*new Date();a=s.createElement(o),\n"
    "m=s.getElementsByTagName(o)[0];a.async=1;a.src=g;m.parentNode.insertBefore(a,m)\n"
    "})(window,document,'script','https://www.google-analytics.com/analytics.js','{function_name}');"
)

_HELPERS = """window.shopsense = window.shopsense || {};
window.shopsense.interpolate_json = function( object, variables ) {
	if ( ! variables ) {
		return object;
	}
	var j = JSON.stringify( object );
	for ( var k in variables ) {
		j = j.split( '{$' + k + '}' ).join( variables[ k ] );
	}
	return JSON.parse( j );
};
window.shopsense.is_valid_email = function( email ) {
	return /^[^\\s@]+@[^\\s@]+\\.[^\\s@]+$/.test( email );
};
window.shopsense.get_payment_method_title = function( value ) {
	var label = document.querySelector( 'label[for="payment_method_' + value + '"]' );
	return label ? label.textContent.trim() : value;
};"""

_PAYMENT_INPUT = "input[name=\"payment_method\"]"


def _js_string(value: str) -> str:
    """Quote ``value`` as a single-quoted JavaScript string literal."""
    escaped = json.dumps(value)[1:-1].replace("'", "\\'").replace("</", "<\\/")
    return f"'{escaped}'"


class ScriptRenderer:
    """
    Renders tracking calls for the configured tracker function.

    Args can be interpolated on the client: pass ``js_args_variable`` and
    ``{$name}`` placeholders in the payload are replaced with values from
    that JavaScript variable at send time.
    """

    def __init__(self, function_name: str = "ga") -> None:
        self.function_name = function_name

    def _call(self, *args: str) -> str:
        return f"{self.function_name}( {', '.join(args)} );"

    @staticmethod
    def _object(data: dict, js_args_variable: str | None = None) -> str:
        encoded = json.dumps(data).replace("</", "<\\/")
        if js_args_variable:
            return f"window.shopsense.interpolate_json( {encoded}, {js_args_variable} )"
        return encoded

    def pageview(self) -> str:
        return self._call("'send'", "'pageview'")

    def event(
        self,
        event_name: str,
        properties: EventProperties,
        js_args_variable: str | None = None,
    ) -> str:
        """``send`` call for an event."""
        return self._call("'send'", self._object(properties.to_fields(event_name), js_args_variable))

    def add_product(self, product: ProductFieldObject) -> str:
        return self._call("'ec:addProduct'", self._object(product.to_payload()))

    def add_impression(self, impression: ProductImpression) -> str:
        return self._call("'ec:addImpression'", self._object(impression.to_payload()))

    def set_action(self, action: ProductAction, js_args_variable: str | None = None) -> str:
        """``ec:setAction`` call, preceded by ``ec:addProduct`` for each product."""
        calls = [self.add_product(product) for product in action.products]
        calls.append(
            self._call(
                "'ec:setAction'",
                _js_string(action.action),
                self._object(action.to_payload(), js_args_variable),
            )
        )
        return "".join(calls)

    # DOM bindings: each wraps ``body`` in a listener.

    @staticmethod
    def on_product_click(product_id: str, body: str) -> str:
        """Run ``body`` when the product is clicked in a product list.

        Clicks on its add-to-cart button are left alone.
        """
        selector = _js_string(f".products .post-{product_id} a")
        return (
            "document.querySelectorAll( " + selector + " ).forEach( function( link ) { "
            "link.addEventListener( 'click', function() { "
            "if ( link.classList.contains( 'add_to_cart_button' ) ) { return; } "
            + body
            + " } ); } );"
        )

    @staticmethod
    def on_billing_email_provided(body: str) -> str:
        """Run ``body`` once, the first time a valid billing email is entered."""
        return (
            "document.addEventListener( 'change', function( e ) { "
            "var input = e.target; "
            "if ( ! input.matches || ! input.matches( 'form.checkout input#billing_email' ) ) "
            "{ return; } "
            "if ( ! window.shopsense.provided_billing_email "
            "&& window.shopsense.is_valid_email( input.value ) ) { "
            "window.shopsense.provided_billing_email = true; "
            + body
            + " } } );"
        )

    @staticmethod
    def unless_payment_method_tracked(body: str) -> str:
        return "if ( ! window.shopsense.payment_method_tracked ) { " + body + " };"

    @staticmethod
    def on_payment_method_selected(body: str, ignore_initial: bool = True) -> str:
        """Run ``body`` when a payment method is chosen.

        ``body`` sees ``args.payment_method``, the title of the method. If the
        visitor never picks one, it runs when the checkout form is submitted.
        With ``ignore_initial`` the method selected on page load is not
        reported as a choice.
        """
        js = ""
        if ignore_initial:
            js += (
                "window.shopsense.selected_payment_method = "
                "( document.querySelector( '" + _PAYMENT_INPUT + ":checked' ) || {} ).value;"
            )
        js += (
            "document.addEventListener( 'click', function( e ) { "
            "var input = e.target; "
            "if ( ! input.matches || ! input.matches( 'form.checkout " + _PAYMENT_INPUT + "' ) ) "
            "{ return; } "
            "if ( window.shopsense.selected_payment_method !== input.value ) { "
            "var args = { payment_method: window.shopsense.get_payment_method_title( input.value ) }; "
            "window.shopsense.payment_method_tracked = true; "
            + body
            + " window.shopsense.selected_payment_method = input.value; } } );"
        )
        js += (
            "document.addEventListener( 'submit', function( e ) { "
            "var form = e.target; "
            "if ( ! form.matches || ! form.matches( 'form.checkout' ) "
            "|| window.shopsense.payment_method_tracked ) { return; } "
            "var checked = form.querySelector( '" + _PAYMENT_INPUT + ":checked' ); "
            "var args = { payment_method: "
            "window.shopsense.get_payment_method_title( checked ? checked.value : '' ) }; "
            + body
            + " } );"
        )
        return js

    def tracking_code(
        self,
        settings: TrackingSettings,
        user_id: str | None = None,
        tracker_options: dict | None = None,
    ) -> str:
        """The page-head snippet that loads analytics.js and creates the tracker."""
        lines = [
            "<script>",
            _HELPERS,
            _LOADER.replace("{function_name}", self.function_name),
            self._call(
                "'create'",
                _js_string(settings.tracking_id),
                json.dumps(tracker_options) if tracker_options else "'auto'",
            ),
            self._call("'set'", "'forceSSL'", "true"),
        ]
        if settings.track_user_id and user_id is not None:
            lines.append(self._call("'set'", "'userId'", _js_string(str(user_id))))
        if settings.anonymize_ip:
            lines.append(self._call("'set'", "'anonymizeIp'", "true"))
        if settings.enable_displayfeatures:
            lines.append(self._call("'require'", "'displayfeatures'"))
        if settings.enable_linkid:
            lines.append(self._call("'require'", "'linkid'"))
        if settings.optimize_code.strip():
            lines.append(self._call("'require'", _js_string(settings.optimize_code.strip())))
        lines.append(self._call("'require'", "'ec'"))
        lines.append("</script>")
        return "\n".join(lines)
