"""
Unit tests for the PropTypes handler, including values imported from other files.
"""
from propdoc.config import PropDocConfig
from propdoc.documentation import Documentation
from propdoc.handlers import ComponentFinder, HandlerContext, prop_types_handler
from propdoc.resolution.resolver import CrossFileResolver


def document(tmp_path, files, root="Component.js"):
    """Run the PropTypes handler over the first component of root."""
    for name, content in files.items():
        (tmp_path / name).write_text(content)
    resolver = CrossFileResolver()
    record = resolver.add_root(tmp_path / root)
    component = ComponentFinder().find(record.program)[0]
    documentation = Documentation(source_file=record.path)
    prop_types_handler(documentation, component, HandlerContext(resolver=resolver, config=PropDocConfig()))
    return documentation


class TestPropTypesHandler:
    """Test reading propTypes objects."""

    def test_simple_types(self, tmp_path):
        """Test simple PropTypes and isRequired."""
        documentation = document(tmp_path, {"Component.js": """
import PropTypes from 'prop-types';
class Button extends React.Component {}
Button.propTypes = {
  /** Text on the button */
  label: PropTypes.string.isRequired,
  onClick: PropTypes.func,
};
"""})

        label = documentation.props["label"]
        assert label.type == {"name": "string"}
        assert label.required is True
        assert label.description == "Text on the button"
        assert documentation.props["onClick"].required is False

    def test_one_of_imported_list(self, tmp_path):
        """Test ``oneOf`` with a list imported from another file."""
        documentation = document(tmp_path, {
            "icon-names.js": "const iconNames = ['home', 'close'];\nexport default iconNames;\n",
            "Component.js": """
import PropTypes from 'prop-types';
import iconNames from './icon-names';
class Icon extends React.Component {}
Icon.propTypes = {
  name: PropTypes.oneOf(iconNames).isRequired,
};
export default Icon;
""",
        })

        name = documentation.props["name"]
        assert name.required is True
        assert name.type == {
            "name": "enum",
            "value": [
                {"value": "'home'", "computed": False},
                {"value": "'close'", "computed": False},
            ],
        }

    def test_one_of_accumulated_declarations(self, tmp_path):
        """Test that every declaration of a re-declared list contributes values."""
        documentation = document(tmp_path, {"Component.js": """
var sizes = ['small'];
var sizes = ['large'];
class Box extends Component {
  static propTypes = { size: PropTypes.oneOf(sizes) };
}
"""})

        values = [item["value"] for item in documentation.props["size"].type["value"]]
        assert values == ["'small'", "'large'"]

    def test_one_of_unresolved(self, tmp_path):
        """Test that an unknown list is reported as computed."""
        documentation = document(tmp_path, {"Component.js": """
import { names } from './missing';
class Box extends Component {
  static propTypes = { kind: PropTypes.oneOf(names) };
}
"""})

        assert documentation.props["kind"].type == {"name": "enum", "computed": True, "value": "names"}

    def test_imported_prop_types_object(self, tmp_path):
        """Test propTypes given by an identifier imported from another file."""
        documentation = document(tmp_path, {
            "shared.js": "export const sharedPropTypes = { id: PropTypes.string.isRequired };\n",
            "Component.js": """
import { sharedPropTypes } from './shared';
class Box extends Component {}
Box.propTypes = sharedPropTypes;
""",
        })

        assert documentation.props["id"].type == {"name": "string"}
        assert documentation.props["id"].required is True

    def test_spread_of_imported_object(self, tmp_path):
        """Test spreading an imported object and composing another component's propTypes."""
        documentation = document(tmp_path, {
            "shared.js": "export const common = { className: PropTypes.string };\n",
            "Component.js": """
import { common } from './shared';
class Box extends Component {}
Box.propTypes = {
  ...common,
  ...Other.propTypes,
  size: PropTypes.number,
};
""",
        })

        assert set(documentation.props) == {"className", "size"}
        assert documentation.composes == {"Other"}

    def test_complex_types(self, tmp_path):
        """Test shape, arrayOf, oneOfType and instanceOf."""
        documentation = document(tmp_path, {"Component.js": """
class Box extends Component {}
Box.propTypes = {
  style: PropTypes.shape({ color: PropTypes.string.isRequired }),
  items: PropTypes.arrayOf(PropTypes.number),
  value: PropTypes.oneOfType([PropTypes.string, PropTypes.number]),
  date: PropTypes.instanceOf(Date),
  custom: validateThing,
};
"""})
        props = documentation.props

        assert props["style"].type == {
            "name": "shape",
            "value": {"color": {"name": "string", "required": True}},
        }
        assert props["items"].type == {"name": "arrayOf", "value": {"name": "number"}}
        assert props["value"].type == {"name": "union", "value": [{"name": "string"}, {"name": "number"}]}
        assert props["date"].type == {"name": "instanceOf", "value": "Date"}
        assert props["custom"].type == {"name": "custom", "raw": "validateThing"}
