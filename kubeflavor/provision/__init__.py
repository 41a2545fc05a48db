"""

.. _scripts:

kubeflavor.provision.scripts
----------------------------

init-ssl-ca
~~~~~~~~~~~

Creates the certificate authority of an SSL working directory, unless
one is already there. Called with the working directory as its only
argument.

.. literalinclude:: ../kubeflavor/provision/scripts/init-ssl-ca
   :language: shell

init-ssl
~~~~~~~~

Issues a key and certificate signed by the working directory's CA and
packs them, together with the CA certificate, into
``<ssl-dir>/<common-name>.tar``.

.. literalinclude:: ../kubeflavor/provision/scripts/init-ssl
   :language: shell

"""
